"""Operation-level errors.

Each error carries an HTTP-like `status_code` and a `category` so hosting
code (HTTP handlers, the Kafka consumer) can map it without string matching.
Channel-level delivery problems are never raised; they are recorded in the
notification result instead.
"""

from __future__ import annotations


class OperationError(Exception):
    status_code = 500
    category = "internal"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInput(OperationError):
    status_code = 400
    category = "bad_request"


class EntityNotFound(OperationError):
    status_code = 400
    category = "bad_request"

    def __init__(self, entity: str, message: str | None = None) -> None:
        super().__init__(message or f"{entity} not found!")
        self.entity = entity


class IncompleteTemplate(OperationError):
    status_code = 500
    category = "internal"

    def __init__(self, key: str) -> None:
        super().__init__(f"Template Data ({key}) is empty!")
        self.key = key
