"""Tests for data models."""

from datetime import date

import pytest

from ngoreceipt.models import (
    DonationRecord,
    IssuerIdentity,
    OrganizationProfile,
    ReceiptRecord,
    RenderedDocument,
)


class TestDonationRecord:
    def test_create_minimal(self):
        donation = DonationRecord(donor_name="Jane", amount=100)
        assert donation.donor_name == "Jane"
        assert donation.donor_email is None
        assert donation.payment_method == "EFT"
        assert donation.date_issued == date.today()

    def test_iso_date_string(self):
        donation = DonationRecord(donor_name="Jane", amount=100, date_issued="2024-03-01")
        assert donation.date_issued == date(2024, 3, 1)

    def test_bad_date_string(self):
        with pytest.raises(ValueError):
            DonationRecord(donor_name="Jane", amount=100, date_issued="01/03/2024")


class TestOrganizationProfile:
    def test_defaults(self):
        org = OrganizationProfile(name="Helping Hands")
        assert org.effective_prefix == "REC-"
        assert org.effective_thank_you_note == "Thank you for your support."

    def test_empty_prefix_falls_back(self):
        org = OrganizationProfile(name="Helping Hands", receipt_prefix="", thank_you_note=None)
        assert org.effective_prefix == "REC-"
        assert org.effective_thank_you_note == "Thank you for your support."

    def test_from_dict_ignores_unknown_keys(self):
        org = OrganizationProfile.from_dict({
            "id": 42,
            "name": "Helping Hands",
            "receipt_prefix": "HH-",
            "logo_path": "42/logo.png",
            "created_at": "2024-01-01T00:00:00Z",
        })
        assert org.id == "42"
        assert org.effective_prefix == "HH-"
        assert org.logo_path == "42/logo.png"

    def test_to_dict(self):
        d = OrganizationProfile(name="Test", reg_no="1").to_dict()
        assert d["name"] == "Test"
        assert d["reg_no"] == "1"
        assert d["tax_no"] is None


class TestIssuerIdentity:
    def test_label_prefers_display_name(self):
        assert IssuerIdentity(email="a@b.org", display_name="Amina").label == "Amina"

    def test_label_falls_back_to_email(self):
        assert IssuerIdentity(email="a@b.org").label == "a@b.org"

    def test_label_dash_when_empty(self):
        assert IssuerIdentity().label == "-"


class TestReceiptRecord:
    def _record(self, **kwargs):
        values = dict(
            organization_id="org-1",
            organization_name="Helping Hands",
            receipt_number="HH-20240301-00042",
            date_issued="2024-03-01",
            donor_name="John Smith",
            amount=250.0,
            pdf_path="org-1/HH-20240301-00042.pdf",
            reference="EFT-778",
        )
        values.update(kwargs)
        return ReceiptRecord(**values)

    def test_search_text(self):
        text = self._record().search_text
        assert "hh-20240301-00042" in text
        assert "john smith" in text
        assert "helping hands" in text
        assert "eft-778" in text

    def test_round_trip_dict(self):
        record = self._record()
        assert ReceiptRecord.from_dict(record.to_dict()) == record

    def test_created_at_default(self):
        assert self._record().created_at


class TestRenderedDocument:
    def test_len_and_defaults(self):
        doc = RenderedDocument(data=b"%PDF-1.4", receipt_number="REC-20240301-00001")
        assert len(doc) == 8
        assert doc.page_size == (595, 842)

    def test_immutable(self):
        doc = RenderedDocument(data=b"x", receipt_number="n")
        with pytest.raises(AttributeError):
            doc.data = b"y"
