"""Receipt persistence: PDF objects plus a searchable metadata index."""

import json
import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from .errors import DuplicateReceiptError, PersistenceError
from .models import ReceiptRecord

logger = logging.getLogger(__name__)


def receipt_pdf_path(organization_id: str, receipt_number: str) -> str:
    """Object path of a receipt PDF: ``{organizationId}/{receiptNumber}.pdf``."""
    return f"{organization_id}/{receipt_number}.pdf"


class ReceiptStore(ABC):
    """Where issued receipts live once they leave the composer."""

    @abstractmethod
    def exists(self, organization_id: str, receipt_number: str) -> bool:
        ...

    @abstractmethod
    def save(self, record: ReceiptRecord, pdf_bytes: bytes) -> ReceiptRecord:
        """Store the PDF and its metadata.

        Raises:
            DuplicateReceiptError: the organization already has this receipt number
            PersistenceError: the upload or the index write failed
        """

    @abstractmethod
    def list_receipts(self, limit: Optional[int] = 100) -> list[ReceiptRecord]:
        """Most recently created receipts first."""

    @abstractmethod
    def load_pdf(self, pdf_path: str) -> bytes:
        ...

    def search(self, query: str, limit: Optional[int] = 100) -> list[ReceiptRecord]:
        """Filter history by receipt number, donor, organization or reference.

        The whole history is filtered before ``limit`` is applied, so older
        receipts stay findable.
        """
        needle = (query or "").strip().lower()
        records = self.list_receipts(limit=None)
        if needle:
            records = [r for r in records if needle in r.search_text]
        return records[:limit] if limit else records


class LocalReceiptStore(ReceiptStore):
    """Filesystem store.

    Layout::

        {root}/receipts.json
        {root}/{organizationId}/{receiptNumber}.pdf
    """

    INDEX_NAME = "receipts.json"

    def __init__(self, root: Path):
        self.root = Path(root)
        self.index_path = self.root / self.INDEX_NAME
        self._lock = threading.Lock()

    def _read_index(self) -> list[dict]:
        if not self.index_path.exists():
            return []
        try:
            data = json.loads(self.index_path.read_text(encoding="utf-8") or "[]")
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Could not read receipt index {self.index_path}: {e}") from e
        if not isinstance(data, list):
            raise PersistenceError(f"Receipt index {self.index_path} is not a list")
        return data

    def _write_index(self, rows: list[dict]):
        tmp = self.index_path.with_suffix(".json.tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(rows, f, indent=2)
        tmp.replace(self.index_path)

    def _resolve(self, pdf_path: str) -> Path:
        target = (self.root / pdf_path).resolve()
        if self.root.resolve() not in target.parents:
            raise PersistenceError(f"Refusing to use path outside the store: {pdf_path}")
        return target

    def exists(self, organization_id: str, receipt_number: str) -> bool:
        organization_id = str(organization_id)
        with self._lock:
            rows = self._read_index()
        return any(
            row.get("organization_id") == organization_id and row.get("receipt_number") == receipt_number
            for row in rows
        )

    def save(self, record: ReceiptRecord, pdf_bytes: bytes) -> ReceiptRecord:
        with self._lock:
            rows = self._read_index()
            for row in rows:
                if (row.get("organization_id") == record.organization_id
                        and row.get("receipt_number") == record.receipt_number):
                    raise DuplicateReceiptError(
                        f"Receipt {record.receipt_number} already exists for organization {record.organization_id}"
                    )

            target = self._resolve(record.pdf_path)
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_bytes(pdf_bytes)
                rows.append(record.to_dict())
                self._write_index(rows)
            except OSError as e:
                logger.error(f"Error saving receipt {record.receipt_number}: {e}")
                raise PersistenceError(f"Could not save receipt {record.receipt_number}: {e}") from e

        logger.info(f"Saved {record.pdf_path}")
        return record

    def list_receipts(self, limit: Optional[int] = 100) -> list[ReceiptRecord]:
        with self._lock:
            rows = self._read_index()
        records = [ReceiptRecord.from_dict(row) for row in rows]
        # index is append-only, so reverse insertion order breaks created_at ties
        records = list(reversed(records))
        records.sort(key=lambda r: r.created_at, reverse=True)
        return records[:limit] if limit else records

    def load_pdf(self, pdf_path: str) -> bytes:
        target = self._resolve(pdf_path)
        try:
            return target.read_bytes()
        except OSError as e:
            raise PersistenceError(f"Could not read {pdf_path}: {e}") from e
