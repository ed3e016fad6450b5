"""Font selection for receipts.

Donor and organization names are free text. The built-in Helvetica family
only covers Latin-1, so a Unicode TrueType family is registered when one
can be found on disk and Helvetica is used otherwise.
"""

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FontSet:
    regular: str
    bold: str
    italic: str


STANDARD_FONTS = FontSet("Helvetica", "Helvetica-Bold", "Helvetica-Oblique")

DEJAVU_FILES = FontSet("DejaVuSans.ttf", "DejaVuSans-Bold.ttf", "DejaVuSans-Oblique.ttf")

DEFAULT_FONT_DIRS = [
    "/usr/share/fonts/truetype/dejavu",
    "/usr/share/fonts/dejavu",
    "/usr/share/fonts/TTF",
    "/usr/local/share/fonts",
    "/Library/Fonts",
    "C:/Windows/Fonts",
]

_lock = threading.Lock()


def _register(path: Path) -> str:
    name = path.stem
    if name not in pdfmetrics.getRegisteredFontNames():
        pdfmetrics.registerFont(TTFont(name, str(path)))
    return name


def register_fonts(font_dir: Optional[Union[str, Path]] = None, files: FontSet = DEJAVU_FILES) -> FontSet:
    """Register a TrueType family for receipts and return its font names.

    Args:
        font_dir: Directory holding the font files; searches the usual
            system font directories when None
        files: File names of the regular, bold and italic faces

    Returns:
        FontSet of registered names, or STANDARD_FONTS if no complete
        family could be loaded
    """
    dirs = [font_dir] if font_dir else DEFAULT_FONT_DIRS

    with _lock:
        for directory in dirs:
            paths = [Path(directory) / name for name in (files.regular, files.bold, files.italic)]
            if not all(p.is_file() for p in paths):
                continue
            try:
                regular, bold, italic = (_register(p) for p in paths)
            except (TTFError, OSError) as e:
                logger.warning(f"Could not load fonts from {directory}: {e}")
                continue
            pdfmetrics.registerFontFamily(regular, normal=regular, bold=bold, italic=italic, boldItalic=bold)
            logger.debug(f"Using {regular} fonts from {directory}")
            return FontSet(regular, bold, italic)

    if font_dir:
        logger.warning(f"No usable {files.regular} family in {font_dir}, falling back to Helvetica")
    else:
        logger.debug("No Unicode TrueType font found, using Helvetica")
    return STANDARD_FONTS
