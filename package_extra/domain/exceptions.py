class PackageExtraException(Exception):
    """Base exception for all package extra-data errors."""
    pass

class NotFoundException(PackageExtraException):
    """Raised when a remote resource answers 404. Expected, never logged."""
    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Not found: {url}")

class FetchFailedException(PackageExtraException):
    """Raised on transport errors, timeouts and unexpected HTTP statuses."""
    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Request to {url} failed: {reason}")

class PackageNotFoundException(PackageExtraException):
    """Raised when a package is missing from the catalog or its metadata is unreadable."""
    pass

class DatabaseException(PackageExtraException):
    """Raised when a database operation fails."""
    pass
