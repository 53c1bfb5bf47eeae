"""Font loading and text measuring.

Clock faces use the BDF bitmap fonts that ship with rpi-rgb-led-matrix
(e.g. 7x14B.bdf). Pillow cannot read BDF directly, so those are
compiled once into Pillow's .pil format in a cache directory.
"""

import hashlib
import logging
import tempfile
from functools import lru_cache
from pathlib import Path

from PIL import BdfFontFile, Image, ImageDraw, ImageFont

from ..core.errors import FontError

logger = logging.getLogger(__name__)

# Fallback TrueType fonts to search
FONT_PATHS = [
    "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/freefont/FreeMono.ttf",
    "/System/Library/Fonts/Menlo.ttc",  # macOS
]

FONT_CACHE_DIR = Path(tempfile.gettempdir()) / "ledclock-fonts"

Font = ImageFont.FreeTypeFont | ImageFont.ImageFont


@lru_cache(maxsize=32)
def get_font(path: str, size: int) -> Font:
    """Get a TrueType font from path with caching.

    Args:
        path: Path to font file
        size: Font size in pixels

    Returns:
        PIL Font object
    """
    try:
        return ImageFont.truetype(path, size)
    except OSError as e:
        logger.warning("Failed to load font %s: %s", path, e)
        return ImageFont.load_default()


def get_default_font(size: int = 8) -> Font:
    """Get the first available system font, or Pillow's built-in one."""
    for font_path in FONT_PATHS:
        if Path(font_path).exists():
            return get_font(font_path, size)

    logger.warning("No system fonts found, using PIL default")
    return ImageFont.load_default()


def bdf_cache_name(path: Path) -> str:
    """Cache file name for a compiled BDF font.

    Fonts with the same file name in different directories get
    different entries.
    """
    parent = str(path.resolve().parent).encode("utf-8")
    digest = hashlib.sha1(parent).hexdigest()[:10]
    return f"{path.stem}-{digest}.pil"


def _compile_bdf(path: Path) -> Path:
    """Compile a BDF font into .pil/.pbm files in the cache directory."""
    FONT_CACHE_DIR.mkdir(parents=True, exist_ok=True)
    target = FONT_CACHE_DIR / bdf_cache_name(path)

    if not target.exists() or target.stat().st_mtime < path.stat().st_mtime:
        with open(path, "rb") as fp:
            font_file = BdfFontFile.BdfFontFile(fp)
        font_file.save(str(target))
        logger.debug("Compiled BDF font %s -> %s", path, target)

    return target


@lru_cache(maxsize=16)
def load_bitmap_font(path: str) -> ImageFont.ImageFont:
    """Load a .bdf or .pil bitmap font.

    Raises:
        FontError: If the file is missing or unreadable
    """
    font_path = Path(path)
    try:
        if font_path.suffix.lower() == ".bdf":
            font_path = _compile_bdf(font_path)
        return ImageFont.load(str(font_path))
    except (OSError, SyntaxError, ValueError) as e:
        raise FontError("Failed to load bitmap font", details={"path": path}, cause=e) from e


def load_font(path: str | None, fallback_size: int = 8) -> Font:
    """Load a bitmap font, falling back to a system font if unavailable."""
    if path:
        try:
            return load_bitmap_font(path)
        except FontError as e:
            logger.warning("%s, using fallback font", e)
    return get_default_font(fallback_size)


def get_text_dimensions(text: str, font: Font | None = None) -> tuple[int, int]:
    """Get the (width, height) of rendered text in pixels."""
    if font is None:
        font = get_default_font()

    dummy_image = Image.new("RGB", (1, 1))
    draw = ImageDraw.Draw(dummy_image)
    bbox = draw.textbbox((0, 0), text, font=font)

    return bbox[2] - bbox[0], bbox[3] - bbox[1]


def get_line_height(font: Font) -> int:
    """Height of a full text line, ascenders to descenders."""
    _, height = get_text_dimensions("Ag0", font)
    return height
