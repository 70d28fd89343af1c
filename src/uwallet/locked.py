"""The locked wallet: an id plus an opaque password-encrypted blob."""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict

from uwallet import cipher
from uwallet.errors import DecryptionError, EncodingError
from uwallet.fields import HexBytes
from uwallet.unlocked import UnlockedWallet

logger = logging.getLogger(__name__)


class LockedWallet(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    ciphertext: HexBytes

    def unlock(self, password: bytes | str) -> UnlockedWallet:
        """Decrypt and parse the wallet.

        A wrong password and a tampered blob both raise DecryptionError.
        A blob that decrypts but does not hold a wallet document raises
        EncodingError. This value is left untouched either way.
        """
        try:
            plaintext = cipher.decrypt(self.ciphertext, password)
        except DecryptionError:
            logger.warning("Failed to unlock wallet %s", self.id)
            raise
        try:
            wallet = UnlockedWallet.deserialize(plaintext)
        except EncodingError:
            logger.warning("Wallet %s decrypted to a malformed document", self.id)
            raise
        finally:
            del plaintext
        logger.debug("Unlocked wallet %s", self.id)
        return wallet
