"""
Pixel Width Calculator
Measures the rendered width of translation text with Pillow font metrics
"""

import logging
import os
from functools import lru_cache
from typing import Optional, Sequence, Tuple

from PIL import ImageFont

logger = logging.getLogger(__name__)

# Average glyph width relative to font size, used when no font file can be loaded
FALLBACK_CHAR_WIDTH_RATIO = 0.5625

# Metric-compatible substitutes for fonts that are rarely installed on servers
FONT_ALIASES = {
    "arial": ["LiberationSans-Regular.ttf", "Arimo-Regular.ttf"],
    "helvetica": ["LiberationSans-Regular.ttf", "Arimo-Regular.ttf"],
    "times new roman": ["LiberationSerif-Regular.ttf", "Tinos-Regular.ttf"],
    "courier new": ["LiberationMono-Regular.ttf", "Cousine-Regular.ttf"],
}


def font_file_candidates(font: str) -> Tuple[str, ...]:
    """File names tried, in order, when loading ``font``."""
    name = font.strip()
    compact = name.replace(" ", "")
    candidates = [
        f"{name}.ttf",
        f"{compact}.ttf",
        f"{compact.lower()}.ttf",
        f"{compact}-Regular.ttf",
    ]
    candidates.extend(FONT_ALIASES.get(name.lower(), []))

    # Keep order, drop duplicates
    return tuple(dict.fromkeys(candidates))


# A miss makes Pillow walk the system font directories; cache hits and misses
# so that walk happens once per (font, size)
@lru_cache(maxsize=128)
def _load_font(font: str, font_size: int, font_dirs: Tuple[str, ...]) -> Optional[ImageFont.FreeTypeFont]:
    for candidate in font_file_candidates(font):
        paths = [os.path.join(d, candidate) for d in font_dirs] + [candidate]
        for path in paths:
            try:
                return ImageFont.truetype(path, size=font_size)
            except (OSError, ValueError, TypeError):
                # Missing file, or a name Pillow cannot open (e.g. embedded NUL)
                continue

    logger.warning(
        f"[Metrics] Font '{font}' not available, using fallback width approximation"
    )
    return None


class PixelWidthCalculator:
    """
    Calculates the pixel width of a string rendered as ``"{size}px {font}"``.

    Fonts are resolved from the configured font directories first and then
    from the system font path. When no font file can be found the width is
    approximated as ``len(text) * font_size * 0.5625``.
    """

    def __init__(
        self,
        font_dirs: Sequence[str] = (),
        default_font: str = "Arial",
        default_font_size: int = 16,
    ):
        self.font_dirs = tuple(font_dirs)
        self.default_font = default_font
        self.default_font_size = default_font_size

    def preload(self) -> bool:
        """Resolve the default font ahead of the first request; True if it loaded."""
        return not self.uses_fallback()

    def measure(self, text: str, font: Optional[str] = None, font_size: Optional[int] = None) -> int:
        """
        Measure text width in whole pixels.

        Args:
            text: Text to measure
            font: Font family name (defaults to the configured font)
            font_size: Font size in pixels (defaults to the configured size)

        Returns:
            Width rounded to the nearest pixel, never negative
        """
        if not text:
            return 0

        font = font or self.default_font
        font_size = font_size or self.default_font_size

        loaded = _load_font(font, int(font_size), self.font_dirs)
        if loaded is None:
            return self.approximate(text, font_size)

        return max(0, int(round(loaded.getlength(text))))

    @staticmethod
    def approximate(text: str, font_size: int) -> int:
        """Deterministic linear estimate used without a rendering font."""
        if not text:
            return 0
        return int(round(len(text) * font_size * FALLBACK_CHAR_WIDTH_RATIO))

    def uses_fallback(self, font: Optional[str] = None, font_size: Optional[int] = None) -> bool:
        font = font or self.default_font
        font_size = font_size or self.default_font_size
        return _load_font(font, int(font_size), self.font_dirs) is None
