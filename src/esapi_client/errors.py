from __future__ import annotations


class ESAPIError(Exception):
    def __init__(self, message: str, *, method: str | None = None, url: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.method = method
        self.url = url

    def __str__(self) -> str:
        if self.method and self.url:
            return f"{self.message} ({self.method} {self.url})"
        return self.message


class TransportError(ESAPIError):
    """The transport could not complete the call."""


class TransportTimeoutError(TransportError):
    pass


class CallCancelledError(TransportError):
    pass


class DeadlineExceededError(TransportTimeoutError):
    pass
