import math

import pytest

from a4framer.units import (
    css_px_to_device_px,
    mm_to_px,
    page_aspect_ratio,
    page_size_px,
    pt_to_px,
)


class TestConversions:

    def test_mm_to_px(self):
        assert mm_to_px(25.4) == pytest.approx(300)
        assert mm_to_px(15) == pytest.approx(177.165, abs=1e-3)

    def test_pt_to_px(self):
        assert pt_to_px(72) == pytest.approx(300)
        assert pt_to_px(24) == pytest.approx(100)

    def test_css_px_to_device_px(self):
        assert css_px_to_device_px(2) == pytest.approx(6.25)
        assert css_px_to_device_px(96) == pytest.approx(300)

    @pytest.mark.parametrize('bad', [-1, -0.5, math.nan, math.inf, -math.inf])
    def test_bad_input_collapses_to_zero(self, bad):
        assert mm_to_px(bad) == 0
        assert pt_to_px(bad) == 0
        assert css_px_to_device_px(bad) == 0


class TestPage:

    def test_a4_at_300_dpi(self):
        assert page_size_px() == (2480, 3508)

    def test_aspect_ratio(self):
        assert page_aspect_ratio() == pytest.approx(297 / 210)
        width, height = page_size_px()
        assert height / width == pytest.approx(page_aspect_ratio(), rel=1e-3)
