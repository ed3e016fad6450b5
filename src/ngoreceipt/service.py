"""Issue receipts end to end: validate, number, render, store."""

import logging
import re
from typing import Optional

from .assets import AssetFetcher
from .composer import ReceiptComposer
from .errors import DuplicateReceiptError, PersistenceError, ValidationError
from .formatting import format_date, to_decimal
from .models import (
    DonationRecord,
    IssuedReceipt,
    IssuerIdentity,
    OrganizationProfile,
    ReceiptRecord,
    RenderedDocument,
)
from .numbering import generate_receipt_number
from .storage import ReceiptStore, receipt_pdf_path
from .validation import validate_donation

logger = logging.getLogger(__name__)

DEFAULT_MAX_NUMBER_ATTEMPTS = 5


def organization_key(org: OrganizationProfile) -> str:
    """Storage key for an organization: its id, or a slug of its name."""
    if org.id:
        return str(org.id)
    slug = re.sub(r"[^a-z0-9]+", "-", (org.name or "").lower()).strip("-")
    return slug or "organization"


def build_record(
    donation: DonationRecord,
    org: OrganizationProfile,
    receipt_number: str,
) -> ReceiptRecord:
    """Metadata row for a receipt, in the shape the history index stores."""
    org_key = organization_key(org)
    return ReceiptRecord(
        organization_id=org_key,
        organization_name=org.name,
        receipt_number=receipt_number,
        date_issued=format_date(donation.date_issued),
        donor_name=donation.donor_name.strip(),
        donor_email=donation.donor_email or None,
        donor_phone=donation.donor_phone or None,
        amount=float(to_decimal(donation.amount)),
        payment_method=donation.payment_method or None,
        reference=donation.reference or None,
        notes=donation.notes or None,
        pdf_path=receipt_pdf_path(org_key, receipt_number),
    )


class ReceiptService:
    """Coordinates the composer with asset fetching and storage.

    Receipt numbers are random, so uniqueness is enforced by the store:
    a number that is already taken is regenerated, up to
    ``max_number_attempts`` times.
    """

    def __init__(
        self,
        store: ReceiptStore,
        composer: Optional[ReceiptComposer] = None,
        fetcher: Optional[AssetFetcher] = None,
        max_number_attempts: int = DEFAULT_MAX_NUMBER_ATTEMPTS,
        number_generator=generate_receipt_number,
    ):
        self.store = store
        self.composer = composer or ReceiptComposer()
        self.fetcher = fetcher or AssetFetcher()
        self.max_number_attempts = max_number_attempts
        self.number_generator = number_generator

    def issue(
        self,
        donation: DonationRecord,
        org: Optional[OrganizationProfile],
        issuer: Optional[IssuerIdentity] = None,
        logo_bytes: Optional[bytes] = None,
        signature_bytes: Optional[bytes] = None,
    ) -> IssuedReceipt:
        """Validate, render and persist one receipt.

        Args:
            donation: Donation form values
            org: Issuing organization
            issuer: Signed-in user for the "Issued by" block
            logo_bytes: Pre-fetched logo; fetched from ``org.logo_url`` when None
            signature_bytes: Pre-fetched signature; fetched from ``issuer.signature_url`` when None

        Returns:
            IssuedReceipt with the stored record and the PDF

        Raises:
            ValidationError: the donation or organization is incomplete
            SerializationError: rendering failed
            PersistenceError: storing failed; ``document`` holds the PDF if one was rendered
        """
        if org is None or not (org.name or "").strip():
            raise ValidationError("Please create/select an NGO first.", field="organization")
        validate_donation(donation)
        issuer = issuer or IssuerIdentity()

        if logo_bytes is None:
            logo_bytes = self.fetcher.fetch(org.logo_url)
        if signature_bytes is None:
            signature_bytes = self.fetcher.fetch(issuer.signature_url)

        org_key = organization_key(org)
        prefix = org.effective_prefix
        last_document: Optional[RenderedDocument] = None

        for attempt in range(1, self.max_number_attempts + 1):
            receipt_number = self.number_generator(prefix, today=donation.date_issued)
            if self.store.exists(org_key, receipt_number):
                logger.warning(f"Receipt number {receipt_number} already taken (attempt {attempt})")
                continue

            document = self.composer.compose(
                donation, org, receipt_number,
                logo_image=logo_bytes,
                issuer=issuer,
                signature_image=signature_bytes,
            )
            last_document = document
            record = build_record(donation, org, receipt_number)

            try:
                self.store.save(record, document.data)
            except DuplicateReceiptError:
                logger.warning(f"Receipt number {receipt_number} was taken while rendering (attempt {attempt})")
                continue
            except PersistenceError as e:
                logger.error(f"Rendered {receipt_number} but could not store it: {e}")
                e.document = document
                raise

            logger.info(f"Issued receipt {receipt_number} for {record.donor_name}")
            return IssuedReceipt(record=record, document=document)

        raise PersistenceError(
            f"Could not allocate a unique receipt number after {self.max_number_attempts} attempts",
            document=last_document,
        )
