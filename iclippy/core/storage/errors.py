"""Storage error types"""


class StorageError(Exception):
    """Base class for history storage failures"""


class StorageUnavailable(StorageError):
    """Database directory or file cannot be created or opened"""


class SchemaInitFailure(StorageError):
    """Table or index creation failed against an opened database"""


class QueryFailure(StorageError):
    """A read or write failed against an otherwise open database"""
