"""Domain error types."""


class UnknownSessionStateError(Exception):
    """Raised when a stored session status cannot be mapped to a phase."""

    def __init__(self, status: str, context: dict[str, object] | None = None) -> None:
        self.status = status
        self.context = context or {}
        super().__init__(f"Unknown session state: {status!r}")


class StoreError(RuntimeError):
    """Raised when the persistent store does not return an expected row."""
