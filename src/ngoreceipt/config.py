"""Settings read from the environment (and a local .env file)."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .composer import DEFAULT_FOOTER_LEFT, DEFAULT_FOOTER_RIGHT
from .formatting import DEFAULT_CURRENCY_SYMBOL
from .models import DEFAULT_BRAND_COLOR

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_DIR = "receipts"
DEFAULT_FETCH_TIMEOUT = 15.0


@dataclass
class Settings:
    storage_dir: Path = Path(DEFAULT_STORAGE_DIR)
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL
    brand_color: str = DEFAULT_BRAND_COLOR
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    footer_left: str = DEFAULT_FOOTER_LEFT
    footer_right: str = DEFAULT_FOOTER_RIGHT
    issuer: Optional[str] = None
    font_dir: Optional[Path] = None

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> "Settings":
        """Load settings from NGORECEIPT_* variables.

        Values already in the environment win over the .env file.
        """
        load_dotenv(dotenv_path=env_file)

        timeout_raw = os.getenv("NGORECEIPT_FETCH_TIMEOUT")
        fetch_timeout = DEFAULT_FETCH_TIMEOUT
        if timeout_raw:
            try:
                fetch_timeout = float(timeout_raw)
            except ValueError:
                logger.warning(f"Ignoring invalid NGORECEIPT_FETCH_TIMEOUT={timeout_raw!r}")

        return cls(
            storage_dir=Path(os.getenv("NGORECEIPT_STORAGE_DIR", DEFAULT_STORAGE_DIR)),
            currency_symbol=os.getenv("NGORECEIPT_CURRENCY_SYMBOL", DEFAULT_CURRENCY_SYMBOL),
            brand_color=os.getenv("NGORECEIPT_BRAND_COLOR", DEFAULT_BRAND_COLOR),
            fetch_timeout=fetch_timeout,
            footer_left=os.getenv("NGORECEIPT_FOOTER_LEFT", DEFAULT_FOOTER_LEFT),
            footer_right=os.getenv("NGORECEIPT_FOOTER_RIGHT", DEFAULT_FOOTER_RIGHT),
            issuer=os.getenv("NGORECEIPT_ISSUER") or None,
            font_dir=Path(os.environ["NGORECEIPT_FONT_DIR"]) if os.getenv("NGORECEIPT_FONT_DIR") else None,
        )
