import io
import logging
from typing import Optional

from PIL import Image, ImageColor, ImageDraw

from .captions import layout_caption
from .errors import SurfaceUnavailableError
from .frames import FrameConfiguration, SourceImage
from .geometry import BorderPath, border_rect, build_border_path, caption_gap, fit_contain
from .units import DPI, css_px_to_device_px, mm_to_px, page_size_px

logger = logging.getLogger(__name__)

BACKGROUND = (255, 255, 255)

# Super-sampling factor for the anti-aliased border stroke
SUPERSAMPLE = 2


def new_surface() -> Image.Image:
    """Fresh white page-sized surface. Never shared between renders."""
    width, height = page_size_px()
    try:
        return Image.new('RGB', (width, height), BACKGROUND)
    except (MemoryError, ValueError) as e:
        raise SurfaceUnavailableError(
            f"Cannot allocate a {width}x{height} output surface: {e}"
        ) from e


def _draw_source(surface: Image.Image, source: SourceImage):
    rect = fit_contain(surface.width, surface.height, source.width, source.height)
    if rect is None:
        logger.warning("Source image '%s' has no area, drawing background only", source.name)
        return

    size = (max(1, round(rect.width)), max(1, round(rect.height)))
    # convert/resize return copies, the caller's image is left alone
    image = source.image.convert('RGBA')
    if image.size != size:
        image = image.resize(size, resample=Image.Resampling.LANCZOS)
    surface.paste(image, (round(rect.x), round(rect.y)), image)


def _stroke_border(surface: Image.Image, path: BorderPath, width_px: float, color):
    if not path.points or width_px <= 0:
        return

    # Stroke at high resolution into a coverage mask, then downsample it
    scale = SUPERSAMPLE
    mask_ss = Image.new('L', (surface.width * scale, surface.height * scale), 0)
    draw_mask = ImageDraw.Draw(mask_ss)
    stroke = max(1, round(width_px * scale))
    draw_mask.line(
        path.scaled(scale),
        fill=255,
        width=stroke,
        joint='curve',
    )
    # Miter joins: a right-angle miter fills the square around the corner
    half = stroke / 2
    for x, y in path.miter_corners():
        draw_mask.rectangle([x * scale - half, y * scale - half, x * scale + half, y * scale + half], fill=255)
    mask = mask_ss.resize(surface.size, resample=Image.Resampling.LANCZOS)

    surface.paste(color, (0, 0, surface.width, surface.height), mask)


def draw_composition(surface: Optional[Image.Image], config: FrameConfiguration,
                     source: Optional[SourceImage] = None) -> bool:
    """
    Draw background, photo, border and caption onto `surface`.

    Returns False without drawing anything when there is no surface or the
    configuration's colours can't be parsed.
    """
    if surface is None:
        logger.warning("No output surface, nothing rendered")
        return False
    try:
        line_rgb = ImageColor.getrgb(config.line_color)
        text_rgb = ImageColor.getrgb(config.text_color)
    except (ValueError, AttributeError) as e:
        logger.warning("Invalid colour in frame configuration, nothing rendered: %s", e)
        return False

    width, height = surface.size

    # 1. Background
    surface.paste(BACKGROUND, (0, 0, width, height))

    # 2. Photo, letterboxed
    if source is not None:
        _draw_source(surface, source)

    # 3. Physical units -> device pixels
    margin_px = mm_to_px(config.margin_mm)
    thickness_px = css_px_to_device_px(config.line_thickness_px)
    radius_px = mm_to_px(config.corner_radius_mm) if config.is_rounded else 0.0

    # 4. Caption font + width, measured on this surface
    draw = ImageDraw.Draw(surface)
    caption = layout_caption(config, draw)

    # 5. Border with the caption gap
    rect = border_rect(width, height, margin_px)
    path = build_border_path(rect, radius_px, caption_gap(caption.text, caption.width))
    _stroke_border(surface, path, thickness_px, line_rgb)

    # 6. Caption centered on the bottom border line
    if caption.text:
        draw.text((width / 2, rect.bottom), caption.text, fill=text_rgb,
                  font=caption.font, anchor='mm')

    return True


def render_composition(config: FrameConfiguration, source: Optional[SourceImage] = None) -> Image.Image:
    """Render one composition onto a newly allocated surface."""
    surface = new_surface()
    draw_composition(surface, config, source)
    return surface


def encode_png(image: Image.Image) -> bytes:
    """Lossless PNG, tagged with the print resolution."""
    buffer = io.BytesIO()
    image.save(buffer, format='PNG', dpi=(DPI, DPI))
    return buffer.getvalue()
