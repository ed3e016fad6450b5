"""Exception hierarchy for receipt generation."""

from typing import Optional


class ReceiptError(Exception):
    """Base class for all receipt errors."""


class ValidationError(ReceiptError):
    """A required donation field is missing or invalid.

    Raised before composition begins, so nothing has been rendered yet.
    """

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class SerializationError(ReceiptError):
    """The PDF renderer failed to produce bytes."""


class PersistenceError(ReceiptError):
    """Uploading the PDF or writing its metadata failed.

    When the PDF was already rendered it is attached as ``document`` so the
    caller can still hand it to the user or retry the upload.
    """

    def __init__(self, message: str, document=None):
        self.document = document
        super().__init__(message)


class DuplicateReceiptError(PersistenceError):
    """A receipt with the same number already exists for the organization."""
