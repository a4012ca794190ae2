class PortalError(Exception):
    """Base exception for the client portal."""

    pass


class NotFoundError(PortalError):
    """Raised when an id has no matching row."""

    def __init__(self, entity: str, key: str):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found: {key}")


class InvalidInputError(PortalError):
    """Raised when a required field is missing or malformed, before any write."""

    pass


class GatewayError(PortalError):
    """Raised when a record-store or blob-store call fails."""

    def __init__(self, operation: str, target: str, cause: Exception | None = None):
        self.operation = operation
        self.target = target
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Gateway {operation} on '{target}' failed{detail}")


class PartialSequenceError(GatewayError):
    """Raised when a multi-step write sequence aborts after committing some steps.

    Nothing already written is rolled back.
    """

    def __init__(
        self,
        sequence: str,
        failed_step: str,
        committed: list[str],
        cause: GatewayError,
        result_id: str | None = None,
    ):
        self.sequence = sequence
        self.failed_step = failed_step
        self.committed = committed
        self.result_id = result_id
        super().__init__(cause.operation, cause.target, cause.cause)

    def __str__(self) -> str:
        return f"{self.sequence} aborted at step '{self.failed_step}' after committing {self.committed}"


class AuthenticationError(PortalError):
    """Raised on bad admin credentials or an unknown/expired session."""

    pass
