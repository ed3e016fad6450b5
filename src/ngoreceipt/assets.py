"""Fetch logo and signature images from signed storage URLs."""

import logging
from typing import Optional

import requests

logger = logging.getLogger(__name__)

MAX_ASSET_BYTES = 5 * 1024 * 1024


class AssetFetcher:
    """Downloads image bytes for embedding in receipts.

    Signed URLs expire, storage can be slow, and images are optional on a
    receipt, so every failure is logged and reported as ``None``.
    """

    def __init__(self, timeout: float = 15, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": "ngoreceipt/1.0"
        })

    def fetch(self, url: Optional[str]) -> Optional[bytes]:
        """Download the asset at ``url``.

        Args:
            url: Time-limited URL of the image, or None

        Returns:
            Raw bytes, or None if there is no URL or the download failed
        """
        if not url:
            return None

        try:
            resp = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning(f"Error fetching asset {url}: {e}")
            return None

        if resp.status_code != 200:
            logger.warning(f"Asset server returned status {resp.status_code} for {url}")
            return None

        content = resp.content
        if not content:
            logger.warning(f"Asset at {url} is empty")
            return None
        if len(content) > MAX_ASSET_BYTES:
            logger.warning(f"Asset at {url} is too large ({len(content):,} bytes)")
            return None

        logger.debug(f"Fetched {len(content):,} bytes from {url}")
        return content
