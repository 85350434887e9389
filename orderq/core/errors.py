"""
Exception types for the ordering question engine.
"""


class SubmissionValidationError(Exception):
    """Base class for submissions rejected before reaching the log."""
    pass


class SchemaError(SubmissionValidationError):
    """Raised when the submission's question reference does not resolve."""
    pass


class TypeMismatchError(SubmissionValidationError):
    """Raised when the resolved question belongs to another question type."""
    pass


class MalformedSubmissionError(SubmissionValidationError):
    """Raised when the submitted order is not a permutation of the question's items."""
    pass


class SubmissionLogError(Exception):
    """Raised when submission log storage operations fail."""
    pass


class UnknownHookError(Exception):
    """Raised when a handler is registered or run for an unknown extension point."""
    pass
