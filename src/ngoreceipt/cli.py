"""Command-line interface for ngoreceipt."""

import argparse
import csv
import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Optional

from .assets import AssetFetcher
from .composer import ReceiptComposer
from .config import Settings
from .errors import ReceiptError
from .fonts import register_fonts
from .formatting import format_currency
from .models import PAYMENT_METHODS, DonationRecord, IssuerIdentity, OrganizationProfile, ReceiptRecord
from .numbering import generate_receipt_number
from .service import ReceiptService
from .storage import LocalReceiptStore
from .validation import validate_donation

logger = logging.getLogger(__name__)

HISTORY_FIELDS = [
    "receipt_number", "date_issued", "organization_name", "donor_name",
    "donor_email", "donor_phone", "amount", "payment_method", "reference",
    "notes", "pdf_path", "created_at",
]


def setup_logging(verbose: bool = False):
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[logging.StreamHandler()]
    )
    # Quiet down requests library
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def load_organization(path: Path) -> OrganizationProfile:
    """Load an organization profile from a JSON file.

    Accepts either a single organizations row or ``{"organization": {...}}``.
    """
    if not path.exists():
        raise FileNotFoundError(f"Organization file not found: {path}")

    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict) and isinstance(data.get("organization"), dict):
        data = data["organization"]
    if not isinstance(data, dict) or not data.get("name"):
        raise ValueError("Organization file must be a JSON object with a 'name'")
    return OrganizationProfile.from_dict(data)


def write_csv(records: list[ReceiptRecord], output_path: Path) -> int:
    """Write receipt history to a CSV file."""
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=HISTORY_FIELDS, extrasaction="ignore")
        writer.writeheader()
        for record in records:
            row = record.to_dict()
            writer.writerow({k: "" if row.get(k) is None else row[k] for k in HISTORY_FIELDS})

    return len(records)


def write_json(records: list[ReceiptRecord], output_path: Path):
    """Write receipt history to a JSON file."""
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump([r.to_dict() for r in records], f, indent=2)


def cmd_number(args, settings: Settings) -> int:
    print(generate_receipt_number(args.prefix or "REC-"))
    return 0


def cmd_issue(args, settings: Settings) -> int:
    org = load_organization(args.org)
    donation = DonationRecord(
        donor_name=args.donor_name,
        amount=args.amount,
        date_issued=args.date or date.today(),
        donor_email=args.email,
        donor_phone=args.phone,
        payment_method=args.method,
        reference=args.reference,
        notes=args.notes,
    )
    issuer = IssuerIdentity(email=args.issuer or settings.issuer)
    logo_bytes = args.logo.read_bytes() if args.logo else None

    composer = ReceiptComposer(
        currency_symbol=settings.currency_symbol,
        brand_color=settings.brand_color,
        footer_left=settings.footer_left,
        footer_right=settings.footer_right,
        fonts=register_fonts(settings.font_dir),
    )
    fetcher = AssetFetcher(timeout=settings.fetch_timeout)

    if args.output:
        # render only, no history entry
        validate_donation(donation)
        if logo_bytes is None:
            logo_bytes = fetcher.fetch(org.logo_url)
        receipt_number = generate_receipt_number(org.effective_prefix, today=donation.date_issued)
        document = composer.compose(donation, org, receipt_number, logo_image=logo_bytes, issuer=issuer)
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_bytes(document.data)
        output = args.output
    else:
        store = LocalReceiptStore(args.storage_dir or settings.storage_dir)
        service = ReceiptService(store, composer=composer, fetcher=fetcher)
        issued = service.issue(donation, org, issuer=issuer, logo_bytes=logo_bytes)
        receipt_number = issued.receipt_number
        output = store.root / issued.record.pdf_path

    if not args.quiet:
        print(f"\n{'='*70}")
        print("RECEIPT ISSUED")
        print(f"{'='*70}")
        print(f"Receipt No: {receipt_number}")
        print(f"Donor: {donation.donor_name}")
        print(f"Amount: {format_currency(donation.amount, settings.currency_symbol)}")
        print(f"Output: {output}")
    else:
        print(receipt_number)
    return 0


def cmd_history(args, settings: Settings) -> int:
    store = LocalReceiptStore(args.storage_dir or settings.storage_dir)
    records = store.search(args.query or "", limit=args.limit)

    if args.output:
        output_path = args.output
        if args.format == "json":
            if output_path.suffix != ".json":
                output_path = output_path.with_suffix(".json")
            write_json(records, output_path)
        else:
            if output_path.suffix != ".csv":
                output_path = output_path.with_suffix(".csv")
            write_csv(records, output_path)
        print(f"Wrote {len(records)} receipt(s) to {output_path}")
        return 0

    if args.format == "json":
        print(json.dumps([r.to_dict() for r in records], indent=2))
        return 0

    if args.format == "csv":
        writer = csv.DictWriter(sys.stdout, fieldnames=HISTORY_FIELDS, extrasaction="ignore")
        writer.writeheader()
        for record in records:
            writer.writerow(record.to_dict())
        return 0

    if not records:
        print("No receipts found.")
        return 0

    for r in records:
        amount = format_currency(r.amount, settings.currency_symbol)
        print(f"{r.receipt_number:<24} {r.date_issued}  {r.donor_name:<28} {amount:>14}  {r.organization_name or ''}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ngoreceipt",
        description="Generate and file PDF donation receipts for nonprofits"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Quiet mode (minimal output)"
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        help="Path to a .env file with NGORECEIPT_* settings"
    )

    sub = parser.add_subparsers(dest="command", required=True)

    p_number = sub.add_parser("number", help="Print a new receipt number")
    p_number.add_argument("prefix", nargs="?", default="REC-", help="Receipt prefix (default: REC-)")
    p_number.set_defaults(func=cmd_number)

    p_issue = sub.add_parser("issue", help="Issue a donation receipt")
    p_issue.add_argument("--org", type=Path, required=True, help="Organization JSON file")
    p_issue.add_argument("--donor-name", required=True, help="Donor full name")
    p_issue.add_argument("--amount", required=True, help="Donation amount, e.g. 250.00")
    p_issue.add_argument("--email", help="Donor email")
    p_issue.add_argument("--phone", help="Donor phone")
    p_issue.add_argument(
        "--method",
        default="EFT",
        help=f"Payment method (e.g. {', '.join(PAYMENT_METHODS)}; default: EFT)"
    )
    p_issue.add_argument("--reference", help="Payment reference")
    p_issue.add_argument("--notes", help="Notes printed on the receipt")
    p_issue.add_argument("--date", type=date.fromisoformat, help="Date issued, YYYY-MM-DD (default: today)")
    p_issue.add_argument("--logo", type=Path, help="Logo image file (overrides the organization's logo_url)")
    p_issue.add_argument("--issuer", help="Email or name shown as 'Issued by'")
    p_issue.add_argument("--storage-dir", type=Path, help="Receipt store directory")
    p_issue.add_argument("-o", "--output", type=Path, help="Write the PDF here instead of filing it")
    p_issue.set_defaults(func=cmd_issue)

    p_history = sub.add_parser("history", help="List or search issued receipts")
    p_history.add_argument("-s", "--search", dest="query", help="Receipt #, donor, NGO or reference")
    p_history.add_argument("--limit", type=int, default=100, help="Maximum rows (default: 100)")
    p_history.add_argument("--format", choices=["table", "csv", "json"], default="table", help="Output format")
    p_history.add_argument("-o", "--output", type=Path, help="Export to file (csv or json)")
    p_history.add_argument("--storage-dir", type=Path, help="Receipt store directory")
    p_history.set_defaults(func=cmd_history)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Setup logging
    if args.quiet:
        logging.basicConfig(level=logging.ERROR)
    else:
        setup_logging(args.verbose)

    settings = Settings.from_env(args.env_file)

    try:
        return args.func(args, settings)
    except ReceiptError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (FileNotFoundError, json.JSONDecodeError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
