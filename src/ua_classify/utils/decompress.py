"""Decompression of ``.bz2`` user-agent dumps before batch classification.

DuckDB reads gzip and zstd transparently but not bz2, so bz2 inputs are
expanded into a cache directory first and reused on later runs.
"""

from __future__ import annotations

import asyncio
import bz2
import hashlib
import os
import shutil
from pathlib import Path
from typing import Sequence, TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from .progress import ProgressTracker


class Decompressor:
    """Expand bz2 inputs concurrently, keeping results in ``cache_dir``.

    Parameters
    ----------
    cache_dir : Path
        Directory receiving decompressed files.
    root : Path | None, optional
        Inputs under ``root`` keep their relative path inside the cache.
        Inputs outside it (or all inputs, when unset) are cached under a
        digest of their absolute path, so equal file names never collide.
    max_workers : int | None, optional
        Concurrent decompression jobs (defaults to CPU count - 1).
    force : bool, optional
        Re-decompress even when a cached copy exists.

    Examples
    --------
    >>> decompressor = Decompressor(cache_dir=Path("cache"), root=Path("logs"))
    >>> files = decompressor.ensure_uncompressed([Path("logs/a/agents.txt.bz2")])
    >>> # files: [Path("cache/a/agents.txt")]
    """

    def __init__(
        self,
        cache_dir: Path,
        root: Path | None = None,
        max_workers: int | None = None,
        force: bool = False,
    ):
        self.cache_dir = cache_dir
        self.root = root.resolve() if root is not None else None
        self.max_workers = max_workers or max(1, (os.cpu_count() or 2) - 1)
        self.force = force

    def destination(self, source: Path) -> Path:
        resolved = source.resolve()
        if self.root is not None:
            try:
                return self.cache_dir / resolved.relative_to(self.root).with_suffix("")
            except ValueError:
                pass
        digest = hashlib.sha1(str(resolved).encode("utf-8")).hexdigest()[:12]
        return self.cache_dir / digest / resolved.with_suffix("").name

    @staticmethod
    def decompress_one(source: Path, destination: Path) -> Path:
        """Expand ``source`` to ``destination``; nothing is left behind on failure."""
        destination.parent.mkdir(parents=True, exist_ok=True)
        partial = destination.with_name(destination.name + ".part")
        logger.info("decompressing {} -> {}", source.name, destination.name)
        try:
            with bz2.open(source, "rb") as src_fh, open(partial, "wb") as dest_fh:
                shutil.copyfileobj(src_fh, dest_fh)
            partial.replace(destination)
        finally:
            partial.unlink(missing_ok=True)
        return destination

    async def _process_files(self, pending: dict[Path, Path]) -> None:
        semaphore = asyncio.Semaphore(self.max_workers)
        loop = asyncio.get_running_loop()

        async def decompress_with_limit(source: Path, destination: Path) -> Path:
            async with semaphore:
                return await loop.run_in_executor(
                    None, self.decompress_one, source, destination
                )

        await asyncio.gather(
            *(decompress_with_limit(src, dest) for dest, src in pending.items())
        )

    def ensure_uncompressed(
        self,
        files: Sequence[Path],
        tracker: ProgressTracker | None = None,
    ) -> list[Path]:
        """Return ``files`` with every ``.bz2`` path replaced by its expansion.

        Parameters
        ----------
        files : Sequence[Path]
            Input paths, compressed or not.
        tracker : ProgressTracker | None, optional
            Receives a step with the number of prepared files.

        Returns
        -------
        list[Path]
            Paths DuckDB can read, in input order.
        """
        # destination -> source; one job per cache entry
        pending: dict[Path, Path] = {}
        prepared: list[Path] = []
        for source in files:
            if source.suffix != ".bz2":
                prepared.append(source)
                continue
            destination = self.destination(source)
            if self.force or not destination.exists():
                pending.setdefault(destination, source)
            prepared.append(destination)

        if pending:
            logger.info(
                "decompressing {} bz2 files with {} workers",
                len(pending),
                self.max_workers,
            )
            asyncio.run(self._process_files(pending))
        else:
            logger.info("no bz2 decompression needed")

        if tracker:
            tracker.step(f"prepared {len(prepared)} input files", files=len(prepared))
        return prepared
