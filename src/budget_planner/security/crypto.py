from __future__ import annotations

import logging
import os

from cryptography.fernet import Fernet, InvalidToken

logger = logging.getLogger(__name__)

# every Fernet token starts with the version byte 0x80, base64 "gAAAAA"
FERNET_PREFIX = "gAAAAA"


def session_key() -> bytes:
    key = os.getenv("MASTER_KEY")
    if not key:
        raise RuntimeError("MASTER_KEY env variable is not set")
    return key.encode()


def is_sealed(value: str) -> bool:
    return value.startswith(FERNET_PREFIX)


def seal_token(token: str) -> str:
    return Fernet(session_key()).encrypt(token.encode()).decode()


def unseal_token(sealed: str) -> str | None:
    """Plain token, or None when it was sealed with another MASTER_KEY."""
    try:
        return Fernet(session_key()).decrypt(sealed.encode()).decode()
    except InvalidToken:
        logger.warning("Stored auth token cannot be decrypted with the current MASTER_KEY")
        return None
