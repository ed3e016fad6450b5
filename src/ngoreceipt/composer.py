"""Donation receipt PDF composer."""

import io
import logging
from typing import Optional

from reportlab.lib import colors
from reportlab.pdfgen import canvas as pdfcanvas

from .errors import SerializationError
from .formatting import DEFAULT_CURRENCY_SYMBOL, format_currency, format_date, org_detail_line
from .fonts import FontSet, register_fonts
from .images import draw_placeholder, embed_image
from .layout import LayoutCursor, wrap_text
from .models import (
    DEFAULT_BRAND_COLOR,
    PAGE_SIZE,
    DonationRecord,
    IssuerIdentity,
    OrganizationProfile,
    RenderedDocument,
)

logger = logging.getLogger(__name__)

STATEMENT = (
    "This receipt acknowledges that the organization listed above has received "
    "the donation described below."
)
RECEIPT_TITLE = "OFFICIAL DONATION RECEIPT"
DEFAULT_FOOTER_LEFT = "Generated by NGO Receipt Generator"
DEFAULT_FOOTER_RIGHT = "Built by Zaid Ragie"

MARGIN = 48
HEADER_HEIGHT = 110
LOGO_TOP = 26
LOGO_SIZE = 58
LINE_HEIGHT = 14
CARD_RADIUS = 12
CARD_PADDING = 14

RULE_COLOR = colors.HexColor("#dcdcdc")
DONOR_CARD_FILL = colors.HexColor("#f7f9ff")


def _grey(level: int) -> colors.Color:
    return colors.Color(level / 255, level / 255, level / 255)


def _dash(value: Optional[str]) -> str:
    return value if value else "-"


class ReceiptComposer:
    """Lays out and serializes a single-page A4 donation receipt.

    The composer holds only presentation settings; every call to
    ``compose`` builds its own canvas, so one instance can serve
    concurrent callers.
    """

    def __init__(
        self,
        currency_symbol: str = DEFAULT_CURRENCY_SYMBOL,
        brand_color: str = DEFAULT_BRAND_COLOR,
        footer_left: str = DEFAULT_FOOTER_LEFT,
        footer_right: str = DEFAULT_FOOTER_RIGHT,
        page_compression: int = 1,
        fonts: Optional[FontSet] = None,
    ):
        self.currency_symbol = currency_symbol
        self.brand_color = brand_color
        self.footer_left = footer_left
        self.footer_right = footer_right
        self.page_compression = page_compression
        self.fonts = fonts or register_fonts()

    def compose(
        self,
        donation: DonationRecord,
        org: OrganizationProfile,
        receipt_number: str,
        logo_image: Optional[bytes] = None,
        issuer: Optional[IssuerIdentity] = None,
        signature_image: Optional[bytes] = None,
    ) -> RenderedDocument:
        """Render the receipt and return the finished PDF.

        Args:
            donation: Validated donation record
            org: Issuing organization
            receipt_number: Number printed in the header
            logo_image: Raw logo bytes; missing or undecodable logos become a placeholder box
            issuer: Identity shown in the "Issued by" block
            signature_image: Raw signature bytes drawn above the signature rule

        Returns:
            RenderedDocument holding the PDF bytes

        Raises:
            SerializationError: reportlab failed to produce the document
        """
        issuer = issuer or IssuerIdentity()
        buf = io.BytesIO()
        sections = []

        try:
            c = pdfcanvas.Canvas(buf, pagesize=PAGE_SIZE, pageCompression=self.page_compression)
            c.setTitle(f"Donation receipt {receipt_number}")
            c.setAuthor(org.name or "")
            c.setSubject(RECEIPT_TITLE.title())

            cursor = LayoutCursor(page_width=PAGE_SIZE[0], page_height=PAGE_SIZE[1], margin=MARGIN)
            brand = self._brand(org)
            date_text = format_date(donation.date_issued)

            self._draw_header(c, cursor, org, receipt_number, date_text, brand, logo_image)
            sections.append("header")

            if self._draw_org_details(c, cursor, org):
                sections.append("organization")

            self._draw_statement(c, cursor)
            sections.append("statement")

            self._draw_donor_card(c, cursor, donation)
            sections.append("donor")

            self._draw_donation_card(c, cursor, donation, brand)
            sections.append("donation")

            self._draw_thank_you(c, cursor, org)
            sections.append("thank_you")

            self._draw_signature_block(c, cursor, issuer, date_text, signature_image)
            sections.append("signature")

            self._draw_footer(c, cursor)
            sections.append("footer")

            c.showPage()
            c.save()
        except Exception as e:
            logger.error(f"Failed to render receipt {receipt_number}: {e}")
            raise SerializationError(f"Could not render receipt {receipt_number}: {e}") from e

        data = buf.getvalue()
        if not data:
            raise SerializationError(f"Renderer returned no bytes for receipt {receipt_number}")

        logger.info(f"Rendered receipt {receipt_number} ({len(data):,} bytes)")
        return RenderedDocument(
            data=data,
            receipt_number=receipt_number,
            page_size=PAGE_SIZE,
            sections=tuple(sections),
        )

    def _brand(self, org: OrganizationProfile) -> colors.Color:
        for value in (org.brand_color, self.brand_color, DEFAULT_BRAND_COLOR):
            if not value:
                continue
            try:
                return colors.HexColor(value)
            except ValueError:
                logger.warning(f"Ignoring invalid brand color {value!r}")
        return colors.HexColor(DEFAULT_BRAND_COLOR)

    def _draw_header(self, c, cursor, org, receipt_number, date_text, brand, logo_image):
        width, height = PAGE_SIZE
        c.setFillColor(brand)
        c.rect(0, height - HEADER_HEIGHT, width, HEADER_HEIGHT, stroke=0, fill=1)

        logo_y = height - LOGO_TOP - LOGO_SIZE
        embed_image(
            c, logo_image, cursor.left, logo_y, LOGO_SIZE, LOGO_SIZE,
            placeholder=lambda: draw_placeholder(c, cursor.left, logo_y, LOGO_SIZE, color=colors.white),
        )

        text_x = cursor.left + LOGO_SIZE + 16
        c.setFillColor(colors.white)
        c.setFont(self.fonts.bold, 18)
        c.drawString(text_x, height - 54, org.name or "NGO")
        c.setFont(self.fonts.regular, 11)
        c.drawString(text_x, height - 76, RECEIPT_TITLE)

        label_x = cursor.right - 170
        value_x = cursor.right - 98
        for baseline, label, value in ((48, "Receipt No:", receipt_number), (68, "Date:", date_text)):
            c.setFont(self.fonts.bold, 11)
            c.drawString(label_x, height - baseline, label)
            c.setFont(self.fonts.regular, 11)
            c.drawString(value_x, height - baseline, value)

        cursor.move_to(HEADER_HEIGHT + 20)

    def _draw_org_details(self, c, cursor, org) -> bool:
        text = org_detail_line(org)
        drawn = False
        if text:
            c.setFont(self.fonts.regular, 10)
            c.setFillColor(_grey(60))
            lines = wrap_text(text, self.fonts.regular, 10, cursor.content_width)
            used = cursor.draw_lines(c, lines, cursor.left, 0, LINE_HEIGHT)
            cursor.advance(used + 6)
            drawn = True
        else:
            cursor.advance(6)

        c.setStrokeColor(RULE_COLOR)
        c.line(cursor.left, cursor.baseline(), cursor.right, cursor.baseline())
        cursor.advance(18)
        return drawn

    def _draw_statement(self, c, cursor):
        c.setFont(self.fonts.regular, 11)
        c.setFillColor(_grey(40))
        lines = wrap_text(STATEMENT, self.fonts.regular, 11, cursor.content_width)
        used = cursor.draw_lines(c, lines, cursor.left, 0, LINE_HEIGHT)
        cursor.advance(max(30, used + 2))

    def _card(self, c, cursor, height, fill=None):
        c.setStrokeColor(RULE_COLOR)
        if fill is not None:
            c.setFillColor(fill)
        c.roundRect(cursor.left, cursor.box_bottom(height), cursor.content_width, height,
                    CARD_RADIUS, stroke=1, fill=1 if fill is not None else 0)

    def _rows(self, c, cursor, rows, label_x, value_x, label_color):
        c.setFont(self.fonts.regular, 11)
        for offset, label, value in rows:
            c.setFillColor(label_color)
            c.drawString(label_x, cursor.baseline(offset), label)
            c.setFillColor(colors.black)
            c.drawString(value_x, cursor.baseline(offset), _dash(value))

    def _draw_donor_card(self, c, cursor, donation):
        card_height = 105
        self._card(c, cursor, card_height, fill=DONOR_CARD_FILL)

        x = cursor.left + CARD_PADDING
        c.setFillColor(colors.black)
        c.setFont(self.fonts.bold, 12)
        c.drawString(x, cursor.baseline(22), "Donor details")

        self._rows(c, cursor, [
            (44, "Name", donation.donor_name),
            (68, "Email", donation.donor_email),
            (92, "Phone", donation.donor_phone),
        ], x, x + 58, _grey(80))

        cursor.advance(card_height + 20)

    def _draw_donation_card(self, c, cursor, donation, brand):
        x = cursor.left + CARD_PADDING
        value_x = cursor.left + 130
        notes_lines = []
        if donation.notes:
            notes_lines = wrap_text(donation.notes, self.fonts.regular, 11, cursor.content_width - 160)

        # card grows with the notes; the page itself does not
        card_height = 140
        if notes_lines:
            card_height = max(card_height, 132 + (len(notes_lines) - 1) * LINE_HEIGHT + 14)
        self._card(c, cursor, card_height)

        banner_height = 44
        c.setFillColor(brand)
        c.roundRect(cursor.left, cursor.box_bottom(banner_height), cursor.content_width, banner_height,
                    CARD_RADIUS, stroke=0, fill=1)

        c.setFillColor(colors.white)
        c.setFont(self.fonts.bold, 14)
        amount = format_currency(donation.amount, self.currency_symbol)
        c.drawString(x, cursor.baseline(28), f"Amount: {amount}")

        c.setFillColor(colors.black)
        c.setFont(self.fonts.bold, 12)
        c.drawString(x, cursor.baseline(68), "Donation details")

        self._rows(c, cursor, [
            (92, "Payment method", donation.payment_method),
            (112, "Reference", donation.reference),
        ], x, value_x, _grey(70))

        if notes_lines:
            c.setFillColor(_grey(70))
            c.drawString(x, cursor.baseline(132), "Notes")
            c.setFillColor(colors.black)
            cursor.draw_lines(c, notes_lines, value_x, 132, LINE_HEIGHT)

        cursor.advance(card_height + 30)

    def _draw_thank_you(self, c, cursor, org):
        c.setFont(self.fonts.italic, 11)
        c.setFillColor(_grey(70))
        lines = wrap_text(org.effective_thank_you_note, self.fonts.italic, 11, cursor.content_width)
        used = cursor.draw_lines(c, lines, cursor.left, 0, LINE_HEIGHT)
        cursor.advance(max(28, used + 14))

    def _draw_signature_block(self, c, cursor, issuer, date_text, signature_image):
        block_height = 90
        self._card(c, cursor, block_height)

        x = cursor.left + CARD_PADDING
        c.setFillColor(colors.black)
        c.setFont(self.fonts.bold, 11)
        c.drawString(x, cursor.baseline(24), "Issued by")
        c.setFont(self.fonts.regular, 10)
        c.setFillColor(_grey(60))
        c.drawString(x, cursor.baseline(40), issuer.label)

        right_x = cursor.left + cursor.content_width / 2 + 10
        c.setFillColor(_grey(90))
        c.drawString(right_x, cursor.baseline(24), "Signature:")

        if signature_image:
            sig_height = 34
            embed_image(c, signature_image, right_x + 55, cursor.box_bottom(sig_height, 10), 130, sig_height)

        rule_y = cursor.baseline(46)
        c.setStrokeColor(_grey(90))
        c.line(right_x, rule_y, cursor.right - CARD_PADDING, rule_y)

        c.drawString(right_x, cursor.baseline(64), "Date:")
        c.setFillColor(colors.black)
        c.drawString(right_x + 35, cursor.baseline(64), date_text)

        cursor.advance(block_height + 20)

    def _draw_footer(self, c, cursor):
        baseline = 28
        c.setFont(self.fonts.regular, 8)
        c.setFillColor(_grey(120))
        if self.footer_left:
            c.drawString(cursor.left, baseline, self.footer_left)
        if self.footer_right:
            c.drawRightString(cursor.right, baseline, self.footer_right)
        c.setFillColor(colors.black)


def compose_receipt(
    donation: DonationRecord,
    org: OrganizationProfile,
    receipt_number: str,
    logo_image: Optional[bytes] = None,
    issuer: Optional[IssuerIdentity] = None,
) -> RenderedDocument:
    """Render a receipt with the default presentation settings."""
    return ReceiptComposer().compose(donation, org, receipt_number, logo_image=logo_image, issuer=issuer)
