import pytest
from pydantic import ValidationError

from blockwatch.config.settings import Settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("ETH_URL", raising=False)
    monkeypatch.delenv("RPC_TIMEOUT_SECONDS", raising=False)

    s = Settings(_env_file=None)

    assert s.eth_url == "https://cloudflare-eth.com"
    assert s.rpc_timeout_seconds == 5.0
    assert s.server_port == 8080


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("ETH_URL", "http://localhost:8545")
    monkeypatch.setenv("rpc_timeout_seconds", "1.5")

    s = Settings(_env_file=None)

    assert s.eth_url == "http://localhost:8545"
    assert s.rpc_timeout_seconds == 1.5


@pytest.mark.parametrize("field,value", [
    ("eth_url", "ws://localhost:8546"),
    ("rpc_timeout_seconds", 0),
    ("log_format", "xml"),
])
def test_invalid_values(field, value):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **{field: value})
