"""Symmetric encryption of stored database passwords (Fernet)."""
import logging
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken

from config import settings

logger = logging.getLogger(__name__)


class CredentialCipher:
    def __init__(self, key: Optional[str] = None):
        key = key if key is not None else settings.CREDENTIAL_KEY
        if not key:
            # Records encrypted with a process-local key do not survive a restart,
            # which matches the in-memory connection store.
            logger.warning("CREDENTIAL_KEY not set; using an ephemeral key")
            key = Fernet.generate_key().decode()
        self._fernet = Fernet(key.encode() if isinstance(key, str) else key)

    def encrypt(self, plaintext: str) -> str:
        return self._fernet.encrypt(plaintext.encode("utf-8")).decode("ascii")

    def decrypt(self, token: str) -> str:
        try:
            return self._fernet.decrypt(token.encode("ascii")).decode("utf-8")
        except InvalidToken as e:
            raise ValueError("Stored credential cannot be decrypted with the configured key") from e
