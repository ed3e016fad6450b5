"""Tests for the receipt composer."""

import re
from datetime import date

import pytest

from reportlab.pdfgen.canvas import Canvas

from ngoreceipt.composer import ReceiptComposer, compose_receipt
from ngoreceipt.errors import SerializationError
from ngoreceipt.fonts import STANDARD_FONTS
from ngoreceipt.layout import wrap_text
from ngoreceipt.models import DonationRecord, IssuerIdentity, OrganizationProfile
from ngoreceipt.numbering import generate_receipt_number

RECEIPT_NO = "HH-20240301-04217"

ALL_SECTIONS = ("header", "organization", "statement", "donor", "donation", "thank_you", "signature", "footer")


class TestComposeReceipt:
    def test_full_receipt(self, composer, donation, org, issuer, png_bytes):
        doc = composer.compose(donation, org, RECEIPT_NO, logo_image=png_bytes, issuer=issuer)
        assert doc.data.startswith(b"%PDF")
        assert len(doc) > 0
        assert doc.page_size == (595, 842)
        assert doc.receipt_number == RECEIPT_NO
        assert doc.sections == ALL_SECTIONS

    def test_contains_key_text(self, composer, donation, org, issuer):
        data = composer.compose(donation, org, RECEIPT_NO, issuer=issuer).data
        assert RECEIPT_NO.encode() in data
        assert b"Amount: R 250.00" in data
        assert b"OFFICIAL DONATION RECEIPT" in data
        assert b"John Smith" in data
        assert b"admin@helpinghands.org" in data
        assert b"2024-03-01" in data

    def test_declared_page_size(self, composer, donation, org):
        data = composer.compose(donation, org, RECEIPT_NO).data
        assert b"595 842" in data

    def test_without_logo(self, composer, donation, org):
        doc = composer.compose(donation, org, RECEIPT_NO, logo_image=None)
        assert doc.sections == ALL_SECTIONS
        assert b"Donor details" in doc.data

    def test_broken_logo_is_not_fatal(self, composer, donation, org):
        doc = composer.compose(donation, org, RECEIPT_NO, logo_image=b"<html>expired</html>")
        assert doc.data.startswith(b"%PDF")

    def test_jpeg_logo(self, composer, donation, org, jpeg_bytes):
        assert composer.compose(donation, org, RECEIPT_NO, logo_image=jpeg_bytes).data

    def test_missing_optional_fields_use_dash(self, composer):
        donation = DonationRecord(donor_name="Anon", amount=10, date_issued=date(2024, 3, 1), payment_method=None)
        org = OrganizationProfile(name="Helping Hands")
        doc = composer.compose(donation, org, RECEIPT_NO)
        assert "organization" not in doc.sections
        assert b"(-) Tj" in doc.data
        assert b"Thank you for your support." in doc.data

    def test_long_notes_wrap_inside_card(self, composer, donation, org):
        donation.notes = "In memory of a dear friend who volunteered every Saturday. " * 8
        lines = wrap_text(donation.notes, STANDARD_FONTS.regular, 11, 499 - 160)
        assert len(lines) > 1

        data = composer.compose(donation, org, RECEIPT_NO).data
        assert b"(Notes) Tj" in data
        for line in lines:
            assert f"({line}) Tj".encode() in data

    def test_donation_card_grows_with_notes(self, composer, donation, org, monkeypatch):
        heights = []
        original = Canvas.roundRect

        def spy(self, x, y, width, height, radius, *args, **kwargs):
            heights.append(height)
            return original(self, x, y, width, height, radius, *args, **kwargs)

        monkeypatch.setattr(Canvas, "roundRect", spy)

        donation.notes = None
        composer.compose(donation, org, RECEIPT_NO)
        assert max(heights) == 140

        heights.clear()
        donation.notes = "In memory of a dear friend who volunteered every Saturday. " * 8
        lines = wrap_text(donation.notes, STANDARD_FONTS.regular, 11, 499 - 160)
        composer.compose(donation, org, RECEIPT_NO)
        assert max(heights) == 132 + (len(lines) - 1) * 14 + 14

    def test_huge_amount_renders(self, composer, donation, org):
        donation.amount = "1e30"
        data = composer.compose(donation, org, RECEIPT_NO).data
        assert b"Amount: R 1" + b"0" * 30 + b".00" in data

    def test_signature_image(self, composer, donation, org, png_bytes):
        issuer = IssuerIdentity(email="admin@helpinghands.org", display_name="Amina Daniels")
        doc = composer.compose(donation, org, RECEIPT_NO, issuer=issuer, signature_image=png_bytes)
        assert b"Amina Daniels" in doc.data

    def test_invalid_brand_color_falls_back(self, composer, donation):
        org = OrganizationProfile(name="Helping Hands", brand_color="not-a-color")
        assert composer.compose(donation, org, RECEIPT_NO).data

    def test_custom_footer(self, donation, org):
        composer = ReceiptComposer(footer_left="Printed by Helping Hands", footer_right="", page_compression=0,
                                   fonts=STANDARD_FONTS)
        data = composer.compose(donation, org, RECEIPT_NO).data
        assert b"Printed by Helping Hands" in data
        assert b"Built by Zaid Ragie" not in data

    def test_serialization_failure(self, composer, donation, org, monkeypatch):
        def boom(self):
            raise IOError("disk full")

        monkeypatch.setattr("ngoreceipt.composer.pdfcanvas.Canvas.save", boom)
        with pytest.raises(SerializationError):
            composer.compose(donation, org, RECEIPT_NO)

    def test_module_function(self, donation, org):
        doc = compose_receipt(donation, org, RECEIPT_NO)
        assert doc.data.startswith(b"%PDF")


class TestEndToEndScenario:
    def test_helping_hands(self):
        org = OrganizationProfile(name="Helping Hands", receipt_prefix="HH-")
        donation = DonationRecord(donor_name="John Smith", amount=250, date_issued="2024-03-01")
        number = generate_receipt_number(org.effective_prefix, today=donation.date_issued)
        assert re.fullmatch(r"HH-20240301-\d{5}", number)

        doc = compose_receipt(donation, org, number)
        assert len(doc) > 0
