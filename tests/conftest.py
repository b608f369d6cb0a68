import pytest

from dh_exchange import config


@pytest.fixture(autouse=True)
def fast_kdf(monkeypatch):
    # PBKDF2 at full strength makes every X3DH test slow
    monkeypatch.setattr(config, "KDF_ITERATIONS", 1)
