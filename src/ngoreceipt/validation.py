"""Donation form validation."""

import logging

from .errors import ValidationError
from .formatting import to_decimal
from .models import DonationRecord

logger = logging.getLogger(__name__)


def validate_donation(donation: DonationRecord) -> DonationRecord:
    """Check the fields a receipt cannot be issued without.

    Returns the donation unchanged so calls can be chained.

    Raises:
        ValidationError: donor name is blank or amount is not greater than 0
    """
    if not (donation.donor_name or "").strip():
        raise ValidationError("Donor name is required.", field="donor_name")

    if to_decimal(donation.amount) <= 0:
        raise ValidationError("Amount must be greater than 0.", field="amount")

    if donation.date_issued is None:
        raise ValidationError("Date issued is required.", field="date_issued")

    logger.debug(f"Validated donation from {donation.donor_name}")
    return donation
