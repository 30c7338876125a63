import pytest

from pystorecore.config import ENV_VAR


@pytest.fixture(autouse=True)
def development_env(monkeypatch):
    """Run every test with composition diagnostics enabled."""
    monkeypatch.delenv(ENV_VAR, raising=False)
