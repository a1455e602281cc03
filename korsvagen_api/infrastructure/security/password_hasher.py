# korsvagen_api/infrastructure/security/password_hasher.py
import bcrypt

from korsvagen_api.core.exceptions import PasswordHashingError
from korsvagen_api.core.logging import get_logger

logger = get_logger(__name__)


class PasswordHasher:
    DEFAULT_ROUNDS = 12

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        self._rounds = rounds

    def hash_password(self, password: str) -> str:
        if not password:
            raise PasswordHashingError("Password must not be empty.")

        try:
            hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=self._rounds))
        except (ValueError, TypeError) as e:
            logger.error("password_hash_failed", error=e.__class__.__name__)
            raise PasswordHashingError() from e

        return hashed.decode("utf-8")

    def verify_password(self, password: str, password_hash: str) -> bool:
        # a corrupt hash reads as a wrong password
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except (ValueError, TypeError, AttributeError):
            logger.warning("password_verify_failed", reason="unreadable_hash")
            return False
