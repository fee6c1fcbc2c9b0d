class LibraryError(Exception):
    """Base class for errors raised by the library core"""


class ValidationError(LibraryError):
    """Missing or malformed input; nothing was written"""

    def __init__(self, message, fields=None):
        super().__init__(message)
        self.fields = list(fields or [])


class ConflictError(LibraryError):
    """The write would break a uniqueness rule; nothing was written"""


class DuplicateApplicationError(ConflictError):
    pass


class DuplicateRecordError(ConflictError):
    def __init__(self, collection, field=None):
        message = f"Duplicate value for {collection}.{field}" if field else f"Duplicate {collection} record"
        super().__init__(message)
        self.collection = collection
        self.field = field


class StorageError(LibraryError):
    """Persistence failed; stored state is unchanged"""
