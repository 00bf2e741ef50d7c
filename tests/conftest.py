import pytest
from cryptography.fernet import Fernet


@pytest.fixture(autouse=True)
def master_key(monkeypatch):
    key = Fernet.generate_key().decode()
    monkeypatch.setenv("MASTER_KEY", key)
    return key
