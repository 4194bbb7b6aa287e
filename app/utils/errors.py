from pymongo.errors import ExecutionTimeout, PyMongoError


class ListingViewError(Exception):
    """Base class for view-tracking failures."""


class InvalidReference(ListingViewError):
    """The listing id is not a well-formed ObjectId."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid listing id: {value!r}")


class StorageUnavailable(ListingViewError):
    """MongoDB could not be reached or rejected the operation."""


class QueryTimeout(StorageUnavailable):
    """A read exceeded its maxTimeMS budget."""


def translate_storage_error(exc: PyMongoError) -> StorageUnavailable:
    if isinstance(exc, ExecutionTimeout):
        return QueryTimeout(str(exc))
    return StorageUnavailable(str(exc))
