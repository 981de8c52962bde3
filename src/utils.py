import re
import uuid
from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerifyMismatchError

ph = PasswordHasher()

uuidv4_pattern = re.compile(
    r"[0-9a-fA-F]{8}\-[0-9a-fA-F]{4}\-4[0-9a-fA-F]{3}\-[89aAbB][0-9a-fA-F]{3}\-[0-9a-fA-F]{12}"
)


# helper functions
def is_valid_uuid(value: Optional[str]) -> bool:
    if not value:
        return False
    return bool(uuidv4_pattern.fullmatch(str(value)))


def create_uuid() -> str:
    return str(uuid.uuid4())


def hash_password(password: str) -> str:
    return ph.hash(password)


def verify_password(hashed_password: str, input_password: str) -> bool:
    try:
        return ph.verify(hashed_password, input_password)
    except (VerifyMismatchError, InvalidHash):
        return False
