import math

# Output resolution and physical page (A4 portrait)
DPI = 300
MM_PER_INCH = 25.4
PT_PER_INCH = 72
CSS_PX_PER_INCH = 96

PAGE_SIZE_MM = (210, 297)


def _clean(value: float) -> float:
    # Negative / NaN / inf collapse to a zero-size draw instead of breaking geometry
    if value is None or not math.isfinite(value) or value < 0:
        return 0.0
    return float(value)


def mm_to_px(mm: float) -> float:
    """Millimeters to device pixels at DPI."""
    return _clean(mm) * (DPI / MM_PER_INCH)


def pt_to_px(pt: float) -> float:
    """Typographic points to device pixels at DPI."""
    return _clean(pt) * (DPI / PT_PER_INCH)


def css_px_to_device_px(px: float) -> float:
    """
    Nominal 96-DPI pixels (the way line thickness is authored) to device pixels.
    2px -> 6.25px at 300 DPI.
    """
    return _clean(px) * (DPI / CSS_PX_PER_INCH)


def page_size_px() -> tuple:
    """Integer page size in device pixels, (2480, 3508) for A4 at 300 DPI."""
    width_mm, height_mm = PAGE_SIZE_MM
    return round(mm_to_px(width_mm)), round(mm_to_px(height_mm))


def page_aspect_ratio() -> float:
    """Height / width of the physical page."""
    width_mm, height_mm = PAGE_SIZE_MM
    return height_mm / width_mm
