"""Shared fixtures."""

import io
from datetime import date

import pytest
from PIL import Image

from ngoreceipt.composer import ReceiptComposer
from ngoreceipt.fonts import STANDARD_FONTS
from ngoreceipt.models import DonationRecord, IssuerIdentity, OrganizationProfile


def _image_bytes(fmt: str, mode: str = "RGB") -> bytes:
    buf = io.BytesIO()
    Image.new(mode, (32, 32), (200, 40, 40) if mode == "RGB" else (200, 40, 40, 255)).save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def png_bytes():
    return _image_bytes("PNG", "RGBA")


@pytest.fixture
def jpeg_bytes():
    return _image_bytes("JPEG")


@pytest.fixture
def org():
    return OrganizationProfile(
        id="org-1",
        name="Helping Hands",
        address="12 Long Street, Cape Town",
        reg_no="123-456 NPO",
        tax_no="930012345",
        receipt_prefix="HH-",
        thank_you_note="Your generosity keeps our soup kitchen open.",
    )


@pytest.fixture
def donation():
    return DonationRecord(
        donor_name="John Smith",
        amount=250,
        date_issued=date(2024, 3, 1),
        donor_email="john@example.org",
        donor_phone="021 555 0100",
        payment_method="EFT",
        reference="JS-0301",
        notes="Monthly pledge for March.",
    )


@pytest.fixture
def issuer():
    return IssuerIdentity(email="admin@helpinghands.org")


@pytest.fixture
def composer():
    # uncompressed streams so tests can look for drawn text
    return ReceiptComposer(page_compression=0, fonts=STANDARD_FONTS)
