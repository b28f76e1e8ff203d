from __future__ import annotations

import secrets
import string

from sqlalchemy import select
from sqlalchemy.orm import Session

from campussync.core.config import get_settings
from campussync.core.exceptions import ConfigurationError
from campussync.models.group import Group

CODE_ALPHABET = string.ascii_uppercase + string.digits
MAX_CODE_ATTEMPTS = 10


def generate_group_code(length: int | None = None) -> str:
    size = length or get_settings().group_code_length
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(size))


def unused_group_code(db: Session) -> str:
    for _ in range(MAX_CODE_ATTEMPTS):
        code = generate_group_code()
        taken = db.execute(select(Group.id).where(Group.code == code)).first()
        if taken is None:
            return code
    raise ConfigurationError("Unable to allocate a unique group code; increase GROUP_CODE_LENGTH")
