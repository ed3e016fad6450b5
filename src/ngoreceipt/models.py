"""Data models for ngoreceipt package."""

from dataclasses import dataclass, asdict, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Union

DEFAULT_PREFIX = "REC-"
DEFAULT_THANK_YOU_NOTE = "Thank you for your support."
DEFAULT_BRAND_COLOR = "#4f8cff"

PAYMENT_METHODS = ("EFT", "Cash", "SnapScan", "Zapper")

# A4 in points, as declared on every rendered receipt
PAGE_SIZE = (595, 842)

Amount = Union[int, float, Decimal, str, None]


@dataclass
class DonationRecord:
    """A single donation as captured on the receipt form."""
    donor_name: str
    amount: Amount
    date_issued: date = field(default_factory=date.today)
    donor_email: Optional[str] = None
    donor_phone: Optional[str] = None
    payment_method: Optional[str] = "EFT"
    reference: Optional[str] = None
    notes: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.date_issued, str):
            self.date_issued = date.fromisoformat(self.date_issued)


@dataclass
class OrganizationProfile:
    """A nonprofit that issues receipts."""
    name: str
    id: Optional[str] = None
    address: Optional[str] = None
    reg_no: Optional[str] = None
    tax_no: Optional[str] = None
    receipt_prefix: Optional[str] = DEFAULT_PREFIX
    thank_you_note: Optional[str] = DEFAULT_THANK_YOU_NOTE
    brand_color: Optional[str] = None
    logo_path: Optional[str] = None
    logo_url: Optional[str] = None

    @property
    def effective_prefix(self) -> str:
        return self.receipt_prefix or DEFAULT_PREFIX

    @property
    def effective_thank_you_note(self) -> str:
        return self.thank_you_note or DEFAULT_THANK_YOU_NOTE

    @classmethod
    def from_dict(cls, data: dict) -> "OrganizationProfile":
        """Build a profile from an organizations row, ignoring unknown keys."""
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        if "id" in known and known["id"] is not None:
            known["id"] = str(known["id"])
        return cls(**known)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)


@dataclass
class IssuerIdentity:
    """The signed-in user shown in the "Issued by" block."""
    email: Optional[str] = None
    display_name: Optional[str] = None
    signature_url: Optional[str] = None

    @property
    def label(self) -> str:
        return self.display_name or self.email or "-"


@dataclass(frozen=True)
class RenderedDocument:
    """A finished receipt PDF. Never mutated after composition."""
    data: bytes
    receipt_number: str
    page_size: tuple = PAGE_SIZE
    sections: tuple = ()

    def __len__(self) -> int:
        return len(self.data)


@dataclass
class ReceiptRecord:
    """Metadata row stored next to each receipt PDF."""
    organization_id: str
    receipt_number: str
    date_issued: str
    donor_name: str
    amount: float
    pdf_path: str
    organization_name: Optional[str] = None
    donor_email: Optional[str] = None
    donor_phone: Optional[str] = None
    payment_method: Optional[str] = None
    reference: Optional[str] = None
    notes: Optional[str] = None
    created_at: str = field(default_factory=lambda: datetime.now().isoformat(timespec="seconds"))

    @property
    def search_text(self) -> str:
        parts = [self.receipt_number, self.donor_name, self.organization_name or "", self.reference or ""]
        return " ".join(parts).lower()

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "ReceiptRecord":
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**known)


@dataclass
class IssuedReceipt:
    """Result of issuing a receipt: the stored record plus the PDF."""
    record: ReceiptRecord
    document: RenderedDocument

    @property
    def receipt_number(self) -> str:
        return self.record.receipt_number
