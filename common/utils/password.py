"""
Password hashing and strength validation.

Example:
    from common.utils import PasswordHasher, validate_password

    is_valid, errors = validate_password("pw123456")
    if not is_valid:
        print("Password errors:", errors)

    hasher = PasswordHasher()
    stored = hasher.hash("pw123456")
    hasher.verify("pw123456", stored)  # True
"""

import base64
import hashlib
import logging
import re
from typing import List, Tuple

import bcrypt as bcrypt_lib

logger = logging.getLogger(__name__)


class PasswordHasher:
    """
    bcrypt password hasher with a fixed cost factor.

    Passwords are SHA-256 pre-hashed before bcrypt so inputs longer than
    bcrypt's 72-byte limit are not silently truncated.
    """

    def __init__(self, rounds: int = 12):
        """
        Initialize the hasher.

        Args:
            rounds: bcrypt cost factor (log2 of the iteration count)
        """
        self.rounds = rounds

    @staticmethod
    def _prehash_password(password: str) -> bytes:
        sha256_hash = hashlib.sha256(password.encode("utf-8")).digest()
        return base64.b64encode(sha256_hash)

    def hash(self, password: str) -> str:
        """Hash a password with a fresh salt."""
        salt = bcrypt_lib.gensalt(rounds=self.rounds)
        return bcrypt_lib.hashpw(self._prehash_password(password), salt).decode("utf-8")

    def verify(self, password: str, hashed: str) -> bool:
        """
        Verify a password against a stored hash.

        A malformed or empty stored hash is a failed verification, not an error.
        """
        if not password or not hashed:
            return False

        try:
            return bcrypt_lib.checkpw(
                self._prehash_password(password),
                hashed.encode("utf-8"),
            )
        except ValueError as e:
            logger.warning(f"Password verification against malformed hash: {e}")
            return False


def validate_password(
    password: str,
    min_length: int = 6,
    max_length: int = 128,
    require_letter: bool = True,
    require_digit: bool = True,
) -> Tuple[bool, List[str]]:
    """
    Validate password strength.

    Args:
        password: The password to validate
        min_length: Minimum password length
        max_length: Maximum password length
        require_letter: Require at least one letter
        require_digit: Require at least one digit

    Returns:
        Tuple of (is_valid: bool, errors: List[str])

    Examples:
        >>> validate_password("pw123456")
        (True, [])
        >>> validate_password("abc")[0]
        False
    """
    errors: List[str] = []

    if not password:
        return False, ["Password is required"]

    if len(password) < min_length:
        errors.append(f"Password must be at least {min_length} characters")

    if len(password) > max_length:
        errors.append(f"Password must be no more than {max_length} characters")

    if require_letter and not re.search(r"[a-zA-Z]", password):
        errors.append("Password must contain at least one letter")

    if require_digit and not re.search(r"\d", password):
        errors.append("Password must contain at least one digit")

    return len(errors) == 0, errors
