"""Rich progress bar for WASM chunk uploads.

Used by ``publish`` and ``release``; the registry service itself only
uploads one chunk per call and knows nothing about rendering.
"""

from __future__ import annotations

from typing import Any

from prometheus_cli.cli.console import get_rich_console
from prometheus_cli.exceptions import EnvironmentError


class ChunkUploadProgress:
    """Progress display for a fixed number of uploaded bytes.

    Usage::

        with ChunkUploadProgress(artifact.size) as progress:
            for chunk in artifact.chunks:
                registry.upload_wasm_chunk(...)
                progress.advance(len(chunk))
    """

    def __init__(self, total_bytes: int, description: str = "Uploading chunks") -> None:
        try:
            from rich.progress import (
                BarColumn,
                DownloadColumn,
                Progress,
                SpinnerColumn,
                TextColumn,
                TimeRemainingColumn,
            )
        except ModuleNotFoundError as exc:
            raise EnvironmentError(
                "rich is not installed. Install with: pip install rich",
            ) from exc

        self._progress: Any = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            DownloadColumn(),
            TimeRemainingColumn(),
            console=get_rich_console(),
            transient=False,
        )
        self._total = total_bytes
        self._description = description
        self._task_id: Any = None
        self._started: bool = False

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> ChunkUploadProgress:
        self.start()
        return self

    def __exit__(self, *_args: object) -> None:
        self.stop()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        if not self._started:
            self._progress.start()
            self._task_id = self._progress.add_task(self._description, total=self._total)
            self._started = True

    def stop(self) -> None:
        """Stop the display (idempotent)."""
        if self._started:
            self._progress.stop()
            self._started = False

    def advance(self, size: int) -> None:
        """Record *size* more bytes as uploaded; ignored once stopped."""
        if self._started:
            self._progress.update(self._task_id, advance=size)
