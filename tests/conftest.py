"""
Shared fixtures: frame configurations and small synthetic photos.
"""

import pytest
from PIL import Image, ImageDraw

from a4framer.frames import FrameConfiguration, SourceImage


def make_photo(size, color='skyblue') -> Image.Image:
    # Same kind of test picture as the root smoke script: sky, grass, sun
    img = Image.new('RGB', size, color=color)
    d = ImageDraw.Draw(img)
    w, h = size
    d.rectangle([w // 8, h * 2 // 3, w * 7 // 8, h], fill='lightgreen')
    d.ellipse([w * 3 // 4, h // 12, w * 7 // 8, h // 4], fill='yellow')
    return img


@pytest.fixture
def config() -> FrameConfiguration:
    return FrameConfiguration()


@pytest.fixture
def no_caption(config) -> FrameConfiguration:
    return config.with_changes(caption_text='')


@pytest.fixture
def landscape_source() -> SourceImage:
    return SourceImage(image=make_photo((800, 600)), name='landscape')


@pytest.fixture
def portrait_source() -> SourceImage:
    return SourceImage(image=make_photo((300, 900), color='salmon'), name='portrait')


@pytest.fixture
def photo_files(tmp_path):
    """Two photos on disk, returned in load order."""
    paths = []
    for name, size in (('beach.holiday.jpg', (800, 600)), ('tower.png', (400, 1000))):
        path = tmp_path / name
        make_photo(size).save(path)
        paths.append(str(path))
    return paths
