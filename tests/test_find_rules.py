import pytest

from aca_safety_net.config import Config
from aca_safety_net.find_rules import analyze_find
from aca_safety_net.tokenizer import tokenize


@pytest.fixture
def config():
    return Config().compile()


def decide(command, config):
    return analyze_find(tokenize(command), config)


def test_find_delete(config):
    decision = decide("find . -name '*.tmp' -delete", config)
    assert decision.is_blocked()
    assert decision.block_info().rule == "find.delete"


def test_find_exec_rm(config):
    decision = decide("find . -name '*.log' -exec rm {} ;", config)
    assert decision.is_blocked()
    assert decision.block_info().rule == "find.exec_rm"


def test_find_exec_rm_escaped_terminator(config):
    assert decide("find . -name '*.log' -exec rm {} \\;", config).is_blocked()


def test_find_exec_rm_plus(config):
    assert decide("find . -name '*.log' -exec rm {} +", config).is_blocked()


def test_find_execdir_rm(config):
    assert decide("find . -name '*.tmp' -execdir rm {} ;", config).is_blocked()


def test_find_exec_rm_full_path(config):
    assert decide("find . -exec /bin/rm {} ;", config).block_info().rule == "find.exec_rm"


def test_find_second_exec_rm(config):
    assert decide("find . -exec cat {} ; -exec rm {} +", config).is_blocked()


def test_find_ok_rm(config):
    decision = decide("find . -name '*.tmp' -ok rm {} ;", config)
    assert decision.is_blocked()
    assert decision.block_info().rule == "find.ok_rm"


def test_find_okdir_rm(config):
    assert decide("find . -okdir rm {} ;", config).block_info().rule == "find.ok_rm"


def test_find_safe(config):
    assert not decide("find . -name '*.rs' -print", config).is_blocked()


def test_find_exec_cat(config):
    assert not decide("find . -name '*.txt' -exec cat {} ;", config).is_blocked()


def test_find_empty(config):
    assert not analyze_find([], config).is_blocked()