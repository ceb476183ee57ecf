import pytest

from spec_sync.core.domain.naming import asset_name, sanitize, state_key


def test_state_key_joins_sanitized_components():
    assert state_key("retail banking", "payments  api", "dev\tstage") == "retail_banking:payments_api:dev_stage"


def test_state_key_defaults_domain():
    assert state_key(None, "payments", "dev") == "demo:payments:dev"
    assert state_key("", "payments", "dev") == "demo:payments:dev"


def test_state_key_is_deterministic():
    assert state_key("d", "s", "t") == state_key("d", "s", "t")


@pytest.mark.parametrize(
    "left, right",
    [
        (("d", "s", "dev"), ("d", "s", "prod")),
        (("d", "a", "t"), ("d", "b", "t")),
        (("x", "s", "t"), ("y", "s", "t")),
    ],
)
def test_state_key_distinguishes_inputs(left, right):
    assert state_key(*left) != state_key(*right)


def test_whitespace_runs_collapse_to_one_separator():
    assert sanitize("a \t\n b") == "a_b"
    assert state_key("d", "a  b", "t") == state_key("d", "a b", "t")


def test_asset_name_uses_sanitized_service():
    assert asset_name("payments api") == "[DEMO] payments_api #main"
    assert asset_name("svc", prefix="", suffix="#stable") == "svc #stable"
