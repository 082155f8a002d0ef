from dataclasses import dataclass, replace

from PIL import Image

# Named caption fonts, CSS-style family lists (first match wins, generic last)
FONT_OPTIONS = {
    'serif': 'Playfair Display, serif',
    'sans': 'Inter, sans-serif',
    'mono': 'Roboto Mono, monospace',
    'garamond': 'EB Garamond, serif',
    'montserrat': 'Montserrat, sans-serif',
    'lato': 'Lato, sans-serif',
}


def font_family_for(name: str) -> str:
    """
    Map a short option name ('serif', 'lato', ...) to its family list.
    Anything containing a comma, or a font file path, is taken as-is.
    """
    if name in FONT_OPTIONS:
        return FONT_OPTIONS[name]
    if ',' in name or name.lower().endswith(('.ttf', '.otf')):
        return name
    raise ValueError(f"Unknown font: {name}. Available: {list(FONT_OPTIONS.keys())}")


@dataclass(frozen=True)
class FrameConfiguration:
    """
    Style of one composition. Read-only during a render; edits produce a new value.
    """
    # Border stroke width in nominal 96-DPI pixels
    line_thickness_px: float = 2
    # Page edge to border distance
    margin_mm: float = 15
    caption_text: str = 'A Beautiful Memory'
    font_family: str = FONT_OPTIONS['serif']
    font_size_pt: float = 24
    is_bold: bool = False
    text_color: str = '#000000'
    line_color: str = '#000000'
    is_rounded: bool = False
    # Only used when is_rounded is set
    corner_radius_mm: float = 10

    def with_changes(self, **changes) -> 'FrameConfiguration':
        return replace(self, **changes)


@dataclass(frozen=True)
class SourceImage:
    """A loaded photo. Held by reference while rendering, never modified."""
    image: Image.Image
    name: str

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height


@dataclass(frozen=True)
class BatchJob:
    source: SourceImage
    # Output file name base, '<name>-framed.png'
    name: str
