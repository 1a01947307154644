"""Exception hierarchy shared by services and view models."""


class HireboardError(Exception):
    """Base class for recoverable application errors."""


class BackendError(HireboardError):
    """A call to the backend failed (network error or rejected request)."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class RecordNotFoundError(HireboardError, LookupError):
    """A write referenced a row that does not exist."""

    def __init__(self, collection: str, record_id: str):
        super().__init__(f"{collection} record not found: {record_id}")
        self.collection = collection
        self.record_id = record_id
