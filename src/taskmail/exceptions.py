"""Custom exceptions for taskmail."""


class TaskMailError(Exception):
    """Base exception for taskmail."""


class ConfigError(TaskMailError):
    """Raised when there is a configuration error."""

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        line: int | None = None,
        col: int | None = None,
    ) -> None:
        self.file_path = file_path
        self.line = line
        self.col = col
        full_message = message
        if file_path:
            location = f" in {file_path}"
            if line is not None:
                location += f" at line {line}"
                if col is not None:
                    location += f", column {col}"
            full_message = f"Configuration error{location}: {message}"
        super().__init__(full_message)


class TransportError(TaskMailError):
    """Raised when a mail server session cannot be opened or used.

    Covers connection, TLS negotiation, authentication and protocol failures.
    The underlying exception is chained as ``__cause__``.
    """

    def __init__(self, role: str, host: str, operation: str, cause: BaseException) -> None:
        self.role = role
        self.host = host
        self.operation = operation
        detail = str(cause) or type(cause).__name__
        super().__init__(f"{operation} failed on {role} server {host}: {detail}")


class TaskNotFoundError(TaskMailError):
    """Raised when a requested task does not exist."""

    def __init__(self, task_id: int) -> None:
        self.task_id = task_id
        super().__init__(f"Task not found: {task_id}")
