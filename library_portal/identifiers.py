import secrets
from uuid import uuid4

STUDENT_ID_PREFIX = "GCMN"


def new_record_id() -> str:
    return uuid4().hex


def new_student_id() -> str:
    """
    Student ids are display-only: two applications may share one.
    """
    return f"{STUDENT_ID_PREFIX}-{secrets.randbelow(1_000_000):06d}"
