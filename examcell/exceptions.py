class AppError(Exception):
    """Base class for all exam cell errors surfaced to API callers."""
    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class ValidationError(AppError):
    """A required field is missing or has an invalid value."""
    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class NotFoundError(AppError):
    """A referenced teacher, classroom or record does not exist."""
    def __init__(self, message: str):
        super().__init__(message, status_code=404)


class ConstraintViolation(AppError):
    """A capacity or semester-mixing rule would be broken."""
    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class EmptyResultError(AppError):
    """The batch allocator produced no pairings."""
    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class StoreError(AppError):
    """The underlying database failed."""
    def __init__(self, message: str = "Database operation failed"):
        super().__init__(message, status_code=500)


class DataFileError(AppError):
    """An ingestion file is missing or unreadable."""
    def __init__(self, message: str):
        super().__init__(message, status_code=500)
