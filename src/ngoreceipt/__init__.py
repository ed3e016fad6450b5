"""
ngoreceipt - PDF donation receipts for nonprofit organizations.

This package numbers donation receipts, lays them out as single-page A4
PDFs with the organization's branding, and files them in a searchable
receipt history.
"""

from .models import (
    DonationRecord,
    IssuedReceipt,
    IssuerIdentity,
    OrganizationProfile,
    ReceiptRecord,
    RenderedDocument,
)
from .errors import (
    DuplicateReceiptError,
    PersistenceError,
    ReceiptError,
    SerializationError,
    ValidationError,
)
from .numbering import generate_receipt_number, parse_receipt_number
from .formatting import format_currency
from .composer import ReceiptComposer, compose_receipt
from .assets import AssetFetcher
from .storage import LocalReceiptStore, ReceiptStore
from .service import ReceiptService

__version__ = "0.1.0"
__all__ = [
    "DonationRecord",
    "IssuedReceipt",
    "IssuerIdentity",
    "OrganizationProfile",
    "ReceiptRecord",
    "RenderedDocument",
    "DuplicateReceiptError",
    "PersistenceError",
    "ReceiptError",
    "SerializationError",
    "ValidationError",
    "generate_receipt_number",
    "parse_receipt_number",
    "format_currency",
    "ReceiptComposer",
    "compose_receipt",
    "AssetFetcher",
    "LocalReceiptStore",
    "ReceiptStore",
    "ReceiptService",
]
