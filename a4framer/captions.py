import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Union

from PIL import Image, ImageDraw, ImageFont

from .frames import FrameConfiguration
from .units import pt_to_px

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r'[\t\n\r\f\v]')

FontType = Union[ImageFont.FreeTypeFont, ImageFont.ImageFont]

# Family name -> (regular, bold) TrueType files, looked up in the system font dirs.
# Generic families fall back to DejaVu, which ships with most Linux installs.
FONT_FILES = {
    'playfair display': ('PlayfairDisplay-Regular.ttf', 'PlayfairDisplay-Bold.ttf'),
    'inter': ('Inter-Regular.ttf', 'Inter-Bold.ttf'),
    'roboto mono': ('RobotoMono-Regular.ttf', 'RobotoMono-Bold.ttf'),
    'eb garamond': ('EBGaramond-Regular.ttf', 'EBGaramond-Bold.ttf'),
    'montserrat': ('Montserrat-Regular.ttf', 'Montserrat-Bold.ttf'),
    'lato': ('Lato-Regular.ttf', 'Lato-Bold.ttf'),
    'serif': ('DejaVuSerif.ttf', 'DejaVuSerif-Bold.ttf'),
    'sans-serif': ('DejaVuSans.ttf', 'DejaVuSans-Bold.ttf'),
    'monospace': ('DejaVuSansMono.ttf', 'DejaVuSansMono-Bold.ttf'),
}


@dataclass(frozen=True)
class CaptionLayout:
    """
    Font and measured width of the caption, computed once per render and used
    both to size the border gap and to draw the text.
    """
    text: str
    font_string: str
    font: FontType
    size_px: float
    width: float


def font_string(family: str, size_px: float, bold: bool) -> str:
    """'[bold ]<size>px <family>', e.g. 'bold 100px Inter, sans-serif'."""
    return f"{'bold ' if bold else ''}{size_px:g}px {family}"


def _candidate_files(family: str, bold: bool):
    for name in family.split(','):
        name = name.strip().strip('"\'')
        if not name:
            continue
        if name.lower().endswith(('.ttf', '.otf')):
            yield name
            continue
        files = FONT_FILES.get(name.lower())
        if files:
            regular, bold_file = files
            if bold:
                yield bold_file
            yield regular


@lru_cache(maxsize=32)
def resolve_font(family: str, size_px: float, bold: bool = False) -> FontType:
    """
    Load the first available face of a CSS-style family list at size_px.
    Falls back to Pillow's bundled font when none of the families is installed.
    """
    for path in _candidate_files(family, bold):
        try:
            font = ImageFont.truetype(path, size=size_px)
        except OSError:
            logger.debug("Font file %s not available", path)
            continue
        logger.debug("Resolved %s to %s", font_string(family, size_px, bold), path)
        return font

    logger.warning("No font found for '%s', using Pillow default", family)
    return ImageFont.load_default(size=size_px)


def layout_caption(config: FrameConfiguration, draw: Optional[ImageDraw.ImageDraw] = None) -> CaptionLayout:
    """
    Resolve the caption font and measure the caption with it.
    Measurement goes through `draw` (the output surface) when given.
    """
    size_px = pt_to_px(config.font_size_pt)
    family = config.font_family
    # Pillow refuses zero-size faces
    font = resolve_font(family, max(size_px, 1.0), config.is_bold)
    # Line breaks render as spaces, the caption is a single line
    text = _WHITESPACE.sub(' ', config.caption_text or '')
    if size_px <= 0:
        # Zero-size caption: nothing to draw, no gap
        text = ''

    width = 0.0
    if text:
        if draw is None:
            draw = ImageDraw.Draw(Image.new('L', (1, 1)))
        width = float(draw.textlength(text, font=font))

    return CaptionLayout(
        text=text,
        font_string=font_string(family, size_px, config.is_bold),
        font=font,
        size_px=size_px,
        width=width,
    )
