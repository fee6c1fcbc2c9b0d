from library_portal.storage.base import (  # noqa: F401
    BOOK_BORROWS,
    COLLECTIONS,
    CONTACT_MESSAGES,
    DONATIONS,
    LIBRARY_CARD_APPLICATIONS,
    NOTES,
    PROFILES,
    RARE_BOOKS,
    USER_ROLES,
    USERS,
    Storage,
)
from library_portal.storage.json_storage import JsonStorage
from library_portal.storage.sql_storage import SqlStorage

BACKENDS = ("json", "sql")


def make_storage(config) -> Storage:
    """Build the storage backend named by `config.STORAGE_BACKEND`."""
    backend = config.STORAGE_BACKEND
    if backend == "json":
        return JsonStorage(config.DATA_FILE)
    if backend == "sql":
        return SqlStorage(config.SQLALCHEMY_DATABASE_URI, echo=config.SQLALCHEMY_ECHO)
    raise ValueError(f"Unknown storage backend {backend!r}, expected one of {BACKENDS}")
