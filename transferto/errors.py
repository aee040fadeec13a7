class TransfertoClientError(Exception):
    """Base class for everything the client raises."""


class TransfertoError(TransfertoClientError):
    """The provider answered but reported a non-zero ``error_code``."""

    def __init__(self, message: str | None, code: str | None):
        super().__init__(message)
        self.name = type(self).__name__
        self.message = message
        self.code = code

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class TransportError(TransfertoClientError):
    """The provider could not be reached or returned an unusable response."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ResponseParseError(TransportError):
    def __init__(self, message: str, line_number: int | None = None, line: str | None = None):
        super().__init__(message)
        self.line_number = line_number
        self.line = line
