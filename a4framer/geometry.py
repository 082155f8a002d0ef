import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

Point = Tuple[float, float]

# Caption gap = measured text width + 5% padding on each side
GAP_PADDING = 1.10

# Points used to flatten each rounded corner
ARC_SEGMENTS = 48


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


# Draw rectangle of a fitted image, same shape as the border rectangle
DrawRect = Rect


def fit_contain(page_w: float, page_h: float, src_w: float, src_h: float) -> Optional[DrawRect]:
    """
    Letterbox-fit a source image into the page, preserving its aspect ratio.
    The result touches the page on the constraining axis and is centered on the other.
    Returns None when the source has no area.
    """
    if src_w <= 0 or src_h <= 0 or page_w <= 0 or page_h <= 0:
        return None

    ratio = src_h / src_w
    if ratio > page_h / page_w:
        # Relatively taller than the page: height is the constraint
        draw_h = page_h
        draw_w = page_h / ratio
    else:
        draw_w = page_w
        draw_h = page_w * ratio

    x = (page_w - draw_w) / 2
    y = (page_h - draw_h) / 2
    return Rect(x, y, draw_w, draw_h)


def border_rect(page_w: float, page_h: float, margin_px: float) -> Rect:
    return Rect(margin_px, margin_px, page_w - 2 * margin_px, page_h - 2 * margin_px)


def caption_gap(text: str, text_width: float) -> float:
    """Width of the undrawn bottom-edge segment reserved for the caption."""
    if not text:
        return 0.0
    return max(0.0, text_width) * GAP_PADDING


def clamp_radius(radius: float, width: float, height: float) -> float:
    """Keep the corner radius within half the rectangle's shorter side."""
    if not math.isfinite(radius):
        radius = 0.0
    return max(0.0, min(radius, width / 2, height / 2))


@dataclass(frozen=True)
class BorderPath:
    """
    Open polyline of the border, running clockwise from the right end of the
    caption gap to its left end. The gap itself is never part of the path.
    """
    rect: Rect
    radius: float
    gap: float
    points: List[Point] = field(default_factory=list)

    @property
    def start(self) -> Optional[Point]:
        return self.points[0] if self.points else None

    @property
    def end(self) -> Optional[Point]:
        return self.points[-1] if self.points else None

    @property
    def is_closed(self) -> bool:
        return bool(self.points) and math.isclose(self.start[0], self.end[0]) \
            and math.isclose(self.start[1], self.end[1])

    def scaled(self, factor: float) -> List[Point]:
        return [(x * factor, y * factor) for x, y in self.points]

    def miter_corners(self) -> List[Point]:
        """Sharp corners that join two drawn edges (none when rounded)."""
        if self.radius > 0:
            return []
        return [corner for prev, corner, nxt in zip(self.points, self.points[1:], self.points[2:])
                if prev != corner and corner != nxt]


def _corner_arc(cx: float, cy: float, radius: float, start_deg: float) -> List[Point]:
    # Sweeps 90 degrees clockwise on screen (decreasing angle, y axis pointing down).
    # Radius 0 collapses to the single corner point.
    segments = ARC_SEGMENTS if radius > 0 else 0
    points = []
    for step in range(segments + 1):
        angle = math.radians(start_deg - 90 * step / max(segments, 1))
        points.append((cx + radius * math.cos(angle), cy + radius * math.sin(angle)))
    return points


def build_border_path(rect: Rect, radius: float, gap: float) -> BorderPath:
    """
    Rounded rectangle with a centered gap on the bottom edge.

    The radius is clamped to half the shorter side. A gap wider than the
    straight part of the bottom edge pins both endpoints to the corner
    tangent points, so the bottom edge disappears. An empty rectangle gives
    an empty path.
    """
    gap = max(0.0, gap)
    if rect.is_empty:
        return BorderPath(rect=rect, radius=0.0, gap=gap)

    r = clamp_radius(radius, rect.width, rect.height)
    left, top, right, bottom = rect.x, rect.y, rect.right, rect.bottom
    center_x = rect.center_x

    start_x = min(center_x + gap / 2, right - r)
    end_x = max(center_x - gap / 2, left + r)

    points: List[Point] = [(start_x, bottom)]
    # bottom-right, top-right, top-left, bottom-left
    corners = [
        (right - r, bottom - r, 90),
        (right - r, top + r, 0),
        (left + r, top + r, -90),
        (left + r, bottom - r, -180),
    ]
    for cx, cy, start_deg in corners:
        points.extend(_corner_arc(cx, cy, r, start_deg))
    points.append((end_x, bottom))

    return BorderPath(rect=rect, radius=r, gap=gap, points=points)
