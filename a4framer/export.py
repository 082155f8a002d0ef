"""
Export of framed compositions to PNG files.

Single exports and batches both render into their own fresh surface. A batch
runs strictly in input order, one item at a time, pausing between items so the
receiving side (a browser download queue, a sync folder, ...) is not flooded.
"""
import logging
import os
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

from .errors import BatchInProgressError
from .frames import BatchJob, FrameConfiguration, SourceImage
from .renderer import encode_png, render_composition

logger = logging.getLogger(__name__)

DEFAULT_DELAY_SEC = 0.5

# Hand-off to whatever stores the file: (filename, png bytes) -> name actually used, or None
Saver = Callable[[str, bytes], Optional[str]]


def output_filename(name: str) -> str:
    return f"{name}-framed.png"


class DirectorySaver:
    """
    Writes exported files into a directory, creating it if needed.

    A name already written by this saver gets a numbered suffix, the way a
    browser renames repeated downloads: 'beach-framed (1).png'.
    """

    def __init__(self, out_dir: str):
        self.out_dir = out_dir
        self._written = set()

    def _unique(self, filename: str) -> str:
        stem, ext = os.path.splitext(filename)
        candidate, n = filename, 0
        while candidate in self._written:
            n += 1
            candidate = f"{stem} ({n}){ext}"
        return candidate

    def __call__(self, filename: str, data: bytes) -> str:
        os.makedirs(self.out_dir, exist_ok=True)
        filename = self._unique(filename)
        path = os.path.join(self.out_dir, filename)
        with open(path, 'wb') as f:
            f.write(data)
        self._written.add(filename)
        logger.debug("Wrote %s (%d bytes)", path, len(data))
        return filename


def export_single(source: Optional[SourceImage], config: FrameConfiguration,
                  saver: Saver, name: Optional[str] = None) -> str:
    """Render, encode and hand off one composition. Returns the file name."""
    if name is None:
        name = source.name if source is not None else 'print'
    filename = output_filename(name)
    image = render_composition(config, source)
    written = saver(filename, encode_png(image))
    return written if isinstance(written, str) else filename


@dataclass
class BatchResult:
    saved: List[str] = field(default_factory=list)
    # (name, error message)
    failed: List[Tuple[str, str]] = field(default_factory=list)
    cancelled: bool = False


class BatchExporter:
    """
    Sequential worker for batch exports with a fixed pause after every item.

    Only one batch may run per exporter at a time; single exports don't go
    through it and can run alongside.
    """

    def __init__(self, saver: Saver, delay: float = DEFAULT_DELAY_SEC,
                 sleep: Callable[[float], None] = time.sleep):
        self.saver = saver
        self.delay = delay
        self._sleep = sleep
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._lock.locked()

    def run(self, jobs: Sequence[BatchJob], config: FrameConfiguration,
            cancel: Optional[threading.Event] = None) -> BatchResult:
        if not self._lock.acquire(blocking=False):
            raise BatchInProgressError("A batch export is already in progress")
        try:
            return self._run(jobs, config, cancel)
        finally:
            self._lock.release()

    def _run(self, jobs, config, cancel) -> BatchResult:
        result = BatchResult()
        logger.info("Batch export of %d item(s) started", len(jobs))

        for index, job in enumerate(jobs):
            # Cancellation is honoured between items only
            if cancel is not None and cancel.is_set():
                logger.info("Batch export cancelled after %d item(s)", index)
                result.cancelled = True
                break

            try:
                filename = export_single(job.source, config, self.saver, name=job.name)
            except Exception as e:
                # One item failing has no bearing on the others
                logger.exception("Export of '%s' failed, continuing with the next item", job.name)
                result.failed.append((job.name, str(e)))
            else:
                result.saved.append(filename)

            if self.delay > 0:
                self._sleep(self.delay)

        logger.info("Batch export finished: %d saved, %d failed",
                    len(result.saved), len(result.failed))
        return result
