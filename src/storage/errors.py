"""Exceptions raised by the data-access layer.

Route handlers never catch these individually; the exception handlers in
``src.api.errors`` translate them into HTTP responses.
"""


class StorageError(Exception):
    """Base class for data-access errors."""


class NotFoundError(StorageError):
    """Raised when a referenced row does not exist."""

    def __init__(self, entity: str, entity_id: int | str | None = None):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found")


class ValidationError(StorageError):
    """Raised when data fails validation below the request schema layer.

    Attributes:
        errors: Mapping of field name to a list of messages.
    """

    def __init__(self, errors: dict[str, list[str]]):
        self.errors = errors
        super().__init__("Validation error")


class ReportTypeNotSupported(StorageError):
    """Raised when a report type has no generator."""

    def __init__(self, report_type: str):
        self.report_type = report_type
        super().__init__(f"Report type '{report_type}' not supported")


class TaskTransitionError(StorageError):
    """Raised when a task status change is not allowed from its current state."""

    def __init__(self, task_id: int, current: str, target: str):
        self.task_id = task_id
        self.current = current
        self.target = target
        super().__init__(f"Invalid transition from {current} to {target}")
