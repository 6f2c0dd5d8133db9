from __future__ import annotations


class ServiceError(RuntimeError):
    """Raised when the authorization backend is unreachable or rejects a call."""

    def __init__(self, message: str, *, operation: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.operation = str(operation)
        self.status_code = status_code


class ValidationGap(ValueError):
    """Raised internally when a submit is attempted with an incomplete selection."""

    def __init__(self, missing: tuple[str, ...]) -> None:
        super().__init__(f"Selection incomplete; missing: {', '.join(missing)}")
        self.missing = missing
