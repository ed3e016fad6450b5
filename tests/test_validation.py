"""Tests for donation validation."""

import pytest

from ngoreceipt.errors import ValidationError
from ngoreceipt.models import DonationRecord
from ngoreceipt.validation import validate_donation


class TestValidateDonation:
    def test_valid(self):
        donation = DonationRecord(donor_name="John Smith", amount="250.00")
        assert validate_donation(donation) is donation

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_blank_donor_name(self, name):
        with pytest.raises(ValidationError) as exc:
            validate_donation(DonationRecord(donor_name=name, amount=10))
        assert exc.value.field == "donor_name"

    @pytest.mark.parametrize("amount", [0, "0", -5, None, "", "abc"])
    def test_amount_must_be_positive(self, amount):
        with pytest.raises(ValidationError) as exc:
            validate_donation(DonationRecord(donor_name="John", amount=amount))
        assert exc.value.field == "amount"

    def test_smallest_positive_amount(self):
        validate_donation(DonationRecord(donor_name="John", amount=0.01))

    def test_very_large_amount(self):
        validate_donation(DonationRecord(donor_name="John", amount="1e30"))
