"""Image embedding with an ordered fallback chain.

A logo or signature arrives as raw bytes of unknown format. Strategies are
tried in order and each one reports success or failure without raising:

1. ``png``: embed losslessly, only for sources that decode as PNG
2. ``jpeg``: decode anything Pillow understands and re-encode as JPEG
3. ``placeholder``: draw an outline box (always succeeds)
"""

import io
import logging
from typing import Callable, Optional

from PIL import Image, UnidentifiedImageError
from reportlab.lib.utils import ImageReader

logger = logging.getLogger(__name__)


def _open(data: bytes) -> Image.Image:
    img = Image.open(io.BytesIO(data))
    img.load()
    return img


def load_png(data: bytes) -> Optional[ImageReader]:
    """Lossless strategy: accept PNG sources as-is."""
    try:
        img = _open(data)
    except (UnidentifiedImageError, OSError, ValueError) as e:
        logger.debug(f"PNG decode failed: {e}")
        return None
    if img.format != "PNG":
        logger.debug(f"Image is {img.format}, not PNG")
        return None
    return ImageReader(img)


def load_jpeg(data: bytes) -> Optional[ImageReader]:
    """Lossy strategy: re-encode any decodable image as JPEG."""
    try:
        img = _open(data)
        buf = io.BytesIO()
        img.convert("RGB").save(buf, format="JPEG", quality=90)
    except (UnidentifiedImageError, OSError, ValueError) as e:
        logger.debug(f"JPEG conversion failed: {e}")
        return None
    buf.seek(0)
    return ImageReader(buf)


IMAGE_STRATEGIES: list[tuple[str, Callable[[bytes], Optional[ImageReader]]]] = [
    ("png", load_png),
    ("jpeg", load_jpeg),
]


def draw_placeholder(canvas, x: float, y: float, size: float, color=None, radius: float = 10):
    """Outline box drawn where an image could not be embedded."""
    canvas.saveState()
    if color is not None:
        canvas.setStrokeColor(color)
    canvas.roundRect(x, y, size, size, radius, stroke=1, fill=0)
    canvas.restoreState()


def embed_image(canvas, data: Optional[bytes], x: float, y: float, width: float, height: float,
                placeholder: Optional[Callable[[], None]] = None) -> str:
    """Draw ``data`` into the box at (x, y), falling back through the strategies.

    Args:
        canvas: reportlab canvas
        data: Raw image bytes, or None when no image is configured
        x, y: Bottom-left corner in reportlab coordinates
        width, height: Box the image is scaled into (aspect ratio preserved)
        placeholder: Called when every strategy fails; None draws nothing

    Returns:
        Name of the strategy that produced the visual
    """
    if data:
        for name, strategy in IMAGE_STRATEGIES:
            reader = strategy(data)
            if reader is None:
                continue
            try:
                canvas.drawImage(reader, x, y, width, height,
                                 preserveAspectRatio=True, anchor="c", mask="auto")
            except Exception as e:
                logger.debug(f"Drawing {name} image failed: {e}")
                continue
            return name
        logger.warning("Could not embed image, using placeholder")

    if placeholder is not None:
        placeholder()
    return "placeholder"
