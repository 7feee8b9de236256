"""Progress reporting utilities."""

import sys
from typing import Optional
from tqdm import tqdm


class DownloadProgress:
    """Progress bar for a streamed download."""

    def __init__(self, total: Optional[int], description: str = "Downloading"):
        self.total = total
        self.description = description
        self.progress_bar = None
        self.received = 0

    def start(self):
        """Start progress reporting."""
        self.progress_bar = tqdm(
            total=self.total,
            desc=self.description,
            unit="B",
            unit_scale=True,
            unit_divisor=1024,
            file=sys.stderr,
            disable=not sys.stderr.isatty()
        )

    def update(self, chunk_size: int):
        """Record ``chunk_size`` more bytes."""
        self.received += chunk_size
        if self.progress_bar:
            self.progress_bar.update(chunk_size)

    def finish(self):
        """Finish progress reporting."""
        if self.progress_bar:
            self.progress_bar.close()

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.finish()
