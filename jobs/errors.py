"""
Purpose: Classified failures for the Jobs capability.

Every failure the Job Service reports carries a `kind` so the transport layer
can tell a fixable request (duplicate reference: fix and resubmit) from a
missing record or a bad upload without parsing messages.
"""


class JobError(Exception):
    """Base class for all job tracker failures."""
    kind = "JobError"


class JobValidationError(JobError):
    """Missing or malformed required field, bad status or bad field name."""
    kind = "ValidationError"


class InvalidStatusError(JobValidationError):
    """Raised when a requested status is not one of the eight job states."""
    kind = "InvalidStatus"


class InvalidFieldError(JobValidationError):
    """Raised when a manual timestamp edit targets a field outside the allow-list."""
    kind = "InvalidField"


class InvalidTransitionError(JobValidationError):
    """Raised by an optional transition guard when a move is not allowed."""
    kind = "InvalidTransition"


class DuplicateReferenceError(JobError):
    """A reference number collided with a stored job or another row of the same batch."""
    kind = "DuplicateReference"


class JobNotFoundError(JobError):
    kind = "NotFound"


class EmptyOrInvalidUploadError(JobError):
    """The upload contained no admissible rows."""
    kind = "EmptyOrInvalidUpload"
