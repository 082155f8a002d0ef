from PIL import Image
import logging
import os
import threading
from typing import List, Optional

from .errors import BatchInProgressError
from .export import BatchExporter, BatchResult, DirectorySaver, DEFAULT_DELAY_SEC, export_single
from .frames import BatchJob, FrameConfiguration, SourceImage
from .renderer import render_composition
from .settings import FramerSettings
from .suggest import apply_suggested_caption

logger = logging.getLogger(__name__)


def display_name(path: str) -> str:
    """File name up to the first dot: 'holiday.beach.jpg' -> 'holiday'."""
    base = os.path.basename(path)
    name = base.split('.')[0]
    return name or os.path.splitext(base)[0] or 'image'


def load_source_image(path: str) -> SourceImage:
    """Load image from disk"""
    if not os.path.exists(path):
        raise FileNotFoundError(f"Input file not found: {path}")
    image = Image.open(path)
    image.load()
    # Keep transparency, flatten everything else (palette, CMYK, grayscale) to RGB
    if image.mode not in ('RGB', 'RGBA'):
        image = image.convert('RGBA' if 'A' in image.getbands() or 'transparency' in image.info else 'RGB')
    logger.debug("Loaded %s (%dx%d, %s)", path, image.width, image.height, image.mode)
    return SourceImage(image=image, name=display_name(path))


class FramePipeline:
    """
    A set of loaded photos sharing one frame configuration.
    Load order is export order.
    """

    def __init__(self, config: Optional[FrameConfiguration] = None):
        self.config = config or FrameConfiguration()
        self.sources: List[SourceImage] = []
        self.selected = 0
        # One batch export at a time per pipeline
        self._batch_lock = threading.Lock()

    def load(self, *paths: str):
        """Load images from disk, appended after the ones already loaded"""
        self.sources.extend(load_source_image(path) for path in paths)
        return self

    def remove(self, index: int):
        del self.sources[index]
        if self.selected >= len(self.sources):
            self.selected = max(0, len(self.sources) - 1)
        return self

    def select(self, index: int):
        if not 0 <= index < len(self.sources):
            raise IndexError(f"No image at position {index}")
        self.selected = index
        return self

    @property
    def current(self) -> Optional[SourceImage]:
        return self.sources[self.selected] if self.sources else None

    def update(self, **changes):
        """Swap in a new configuration with the given fields changed"""
        self.config = self.config.with_changes(**changes)
        return self

    def suggest_caption(self, settings: FramerSettings, client=None):
        """Replace the caption with a model suggestion for the current image, if one comes back"""
        if self.current is not None:
            self.config = apply_suggested_caption(self.config, self.current, settings, client=client)
        return self

    def render(self, index: Optional[int] = None) -> Image.Image:
        """Render a composition (blank framed page when nothing is loaded)"""
        source = self.current if index is None else self.sources[index]
        return render_composition(self.config, source)

    def save(self, out_dir: str, index: Optional[int] = None) -> str:
        """Export one composition, returns the written path"""
        source = self.current if index is None else self.sources[index]
        filename = export_single(source, self.config, DirectorySaver(out_dir))
        return os.path.join(out_dir, filename)

    def save_all(self, out_dir: str, delay: float = DEFAULT_DELAY_SEC, sleep=None) -> BatchResult:
        """Export every loaded image with the shared configuration"""
        if not self._batch_lock.acquire(blocking=False):
            raise BatchInProgressError("A batch export is already in progress")
        try:
            kwargs = {} if sleep is None else {'sleep': sleep}
            exporter = BatchExporter(DirectorySaver(out_dir), delay=delay, **kwargs)
            jobs = [BatchJob(source=source, name=source.name) for source in self.sources]
            return exporter.run(jobs, self.config)
        finally:
            self._batch_lock.release()

    @property
    def is_exporting(self) -> bool:
        return self._batch_lock.locked()
