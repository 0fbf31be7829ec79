"""Custom exceptions for the editorial pipeline."""


class EditorialError(Exception):
    """Base exception for all editorial pipeline errors."""

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


class BundleError(EditorialError):
    """Raised when a content bundle directory is malformed."""

    pass


class MissingFieldError(EditorialError):
    """Raised when a required metadata field is absent or blank."""

    def __init__(self, field: str, message: str | None = None):
        self.field = field
        super().__init__(message or f"Missing required field: {field}")


class InvalidFieldError(EditorialError):
    """Raised when a metadata field holds a malformed value."""

    def __init__(self, field: str, value, message: str | None = None):
        self.field = field
        self.value = value
        super().__init__(message or f"Invalid value for {field}: {value!r}")


class InvalidEnumError(InvalidFieldError):
    """Raised when an enumerated field holds a value outside its set."""

    def __init__(self, field: str, value, allowed: list[str]):
        self.allowed = list(allowed)
        super().__init__(
            field,
            value,
            f"Invalid value for {field}: {value!r} "
            f"(expected one of: {', '.join(self.allowed)})",
        )


class IllegalTransitionError(EditorialError):
    """Raised when a workflow transition is outside the allowed edge set."""

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Illegal transition: {current} -> {target}")


class StaleRevisionError(EditorialError):
    """Raised when a workflow record changed since the caller last read it."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Stale workflow revision: expected {expected}, found {actual}"
        )


class NotReadyError(EditorialError):
    """Raised when exporting an article that has not been approved."""

    def __init__(self, slug: str, state: str):
        self.slug = slug
        self.state = state
        super().__init__(f"Article {slug} is not ready for export (state: {state})")
