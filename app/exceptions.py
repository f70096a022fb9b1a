"""Domain-specific exceptions with user-ready messages for the rig history tracker."""


class BusinessLogicException(Exception):
    """Base exception class for business logic errors.

    All business logic exceptions include user-ready messages that can be
    displayed directly in the UI without client-side message construction.
    """

    def __init__(self, message: str, error_code: str) -> None:
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class RecordNotFoundException(BusinessLogicException):
    """Exception raised when a requested record is not found."""

    def __init__(self, resource_type: str, identifier: str | int) -> None:
        message = f"{resource_type} {identifier} was not found"
        super().__init__(message, error_code="RECORD_NOT_FOUND")


class InvalidInputException(BusinessLogicException):
    """Exception raised when input fails a check that does not depend on stored state."""

    def __init__(self, field: str, cause: str) -> None:
        self.field = field
        self.cause = cause
        message = f"Invalid {field}: {cause}"
        super().__init__(message, error_code="INVALID_INPUT")


class InvalidOperationException(BusinessLogicException):
    """Exception raised when an operation cannot be performed due to business rules."""

    def __init__(self, operation: str, cause: str) -> None:
        self.operation = operation
        self.cause = cause
        message = f"Cannot {operation} because {cause}"
        super().__init__(message, error_code="INVALID_OPERATION")


class TransactionFailedException(BusinessLogicException):
    """Exception raised when the store rejected a write and the unit was rolled back."""

    def __init__(self, operation: str, cause: str) -> None:
        self.operation = operation
        message = f"Could not {operation}: the change was rolled back ({cause})"
        super().__init__(message, error_code="TRANSACTION_FAILED")
