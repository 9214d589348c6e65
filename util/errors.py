# util/errors.py
from fastapi import HTTPException, status
from util.enums import ErrorMessage


class AppError(HTTPException):
    # Flow: raise AppError to short-circuit with a typed status & message.
    def __init__(
        self, message: str, http_status: int = status.HTTP_400_BAD_REQUEST
    ) -> None:
        super().__init__(status_code=http_status, detail=message)

    @classmethod
    def of(cls, error: ErrorMessage) -> "AppError":
        return cls(error.value.message, error.value.http_status)


class CacheConnectionError(ConnectionError):
    """
    A cache server (or the whole pool) could not be reached: connect, socket
    or timeout failure. Raised by the cache client, never retried in the core.
    """

    def __init__(self, target: str, reason: str = "") -> None:
        self.target = target
        self.reason = reason
        suffix = f" ({reason})" if reason else ""
        super().__init__(f"{target} unreachable{suffix}")
