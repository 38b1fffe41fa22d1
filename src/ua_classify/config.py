"""Runtime configuration.

Settings come from environment variables, optionally seeded from a ``.env``
file via python-dotenv. Command line flags override them.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv
from loguru import logger

PREFIX = "UA_CLASSIFY_"
TRUTHY = frozenset({"1", "true", "yes", "on"})


def configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="INFO" if verbose else "WARNING")


def env_path(name: str, default: Path) -> Path:
    value = os.getenv(name)
    return Path(value).expanduser() if value else default


def env_int(name: str, default: int | None) -> int | None:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("{}={} is not an integer, using default", name, value)
        return default


def env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in TRUTHY


def env_str(name: str) -> str | None:
    value = os.getenv(name)
    return value.strip() if value else None


@dataclass(frozen=True)
class Settings:
    """Resolved configuration for CLI and batch runs.

    Attributes
    ----------
    verbose : bool
        Log at INFO instead of WARNING.
    progress : bool
        Show the Rich progress display during batch runs.
    output_dir : Path
        Default directory for batch output.
    cache_dir : Path
        Where decompressed ``.bz2`` inputs are kept.
    database : Path | None
        DuckDB database file; ``None`` means in-memory.
    threads : int | None
        DuckDB worker threads.
    decompress_workers : int | None
        Concurrent decompression jobs.
    force_decompress : bool
        Ignore the decompression cache.
    """

    verbose: bool = False
    progress: bool = False
    output_dir: Path = Path("classified")
    cache_dir: Path = Path("classified") / "decompressed"
    database: Path | None = None
    threads: int | None = None
    decompress_workers: int | None = None
    force_decompress: bool = False

    @classmethod
    def from_env(cls, dotenv: bool = True) -> Settings:
        """Build settings from ``UA_CLASSIFY_*`` environment variables."""
        if dotenv:
            load_dotenv(find_dotenv(usecwd=True))

        output_dir = env_path(PREFIX + "OUTPUT_DIR", Path("classified"))
        database = env_str(PREFIX + "DUCKDB_FILE")
        return cls(
            verbose=env_bool(PREFIX + "VERBOSE", False),
            progress=env_bool(PREFIX + "PROGRESS", False),
            output_dir=output_dir,
            cache_dir=env_path(PREFIX + "CACHE_DIR", output_dir / "decompressed"),
            database=Path(database).expanduser() if database else None,
            threads=env_int(PREFIX + "DUCKDB_THREADS", None),
            decompress_workers=env_int(PREFIX + "DECOMPRESS_WORKERS", None),
            force_decompress=env_bool(PREFIX + "FORCE_DECOMPRESS", False),
        )
