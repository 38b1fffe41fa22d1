"""Classify files of user-agent strings into a TSV through DuckDB.

Input files hold one user agent per line; ``.bz2`` inputs are decompressed
first. Output columns follow :meth:`Classification.as_dict`, with the
user agent written as it appeared in the input.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

import duckdb
from loguru import logger

from .config import Settings
from .duckdb_udf import register_functions
from .utils.decompress import Decompressor
from .utils.progress import ProgressTracker

BATCH_STEPS = 4
# never present in a user agent, so each line is one field
FIELD_SEPARATOR = "\x01"
TABLE = "agents"

OUTPUT_COLUMNS: tuple[tuple[str, str], ...] = (
    ("user_agent", "user_agent"),
    ("browser", "ua_browser(user_agent)"),
    ("browser_version", "ua_browser_version(user_agent)"),
    ("os", "ua_os(user_agent)"),
    ("os_version", "ua_os_version(user_agent)"),
    ("os_major_version", "ua_os_major_version(user_agent)"),
    ("mobile", "ua_mobile(user_agent)"),
    ("tablet", "ua_tablet(user_agent)"),
)


@dataclass
class BatchResult:
    """Outcome of :func:`classify_file`."""

    output: Path
    rows: int
    summary: list[tuple[str, str, int]] = field(default_factory=list)


def validate_inputs(paths: Sequence[Path]) -> list[Path]:
    if not paths:
        raise ValueError("No input files given")
    checked: list[Path] = []
    for path in paths:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Input file not found: {path}")
        if not path.is_file():
            raise ValueError(f"Path is not a file: {path}")
        checked.append(path)
    return checked


def join_file_list(files: Sequence[Path]) -> str:
    escaped = [file.as_posix().replace("'", "''") for file in files]
    return ", ".join(f"'{path}'" for path in escaped)


def load_agents(conn: duckdb.DuckDBPyConnection, paths: Sequence[Path]) -> int:
    """Load every line of ``paths`` into the ``agents`` table, keeping order.

    Only ``\\n`` ends a line, so a stray carriage return stays part of the
    user agent; a trailing ``\\r`` from CRLF files is dropped.
    """
    conn.execute(
        f"CREATE OR REPLACE TABLE {TABLE} "
        "(file_no INTEGER, line BIGINT, user_agent VARCHAR)"
    )
    for file_no, path in enumerate(paths):
        conn.execute(
            f"""
            INSERT INTO {TABLE}
            SELECT
                {file_no},
                row_number() OVER (),
                regexp_replace(COALESCE(user_agent, ''), '\\r$', '')
            FROM read_csv(
                [{join_file_list([path])}],
                delim='{FIELD_SEPARATOR}',
                quote='',
                escape='',
                new_line='\\n',
                header=FALSE,
                columns={{'user_agent': 'VARCHAR'}},
                nullstr='',
                auto_detect=FALSE,
                strict_mode=FALSE,
                null_padding=TRUE
            );
            """
        )
    (total,) = conn.execute(f"SELECT count(*) FROM {TABLE}").fetchone()
    logger.info("loaded {} user agents from {} files", total, len(paths))
    return total


def classified_query() -> str:
    projection = ",\n        ".join(
        f"{expr} AS {name}" for name, expr in OUTPUT_COLUMNS
    )
    return f"""
        SELECT
        file_no,
        line,
        {projection}
        FROM {TABLE}
        """


def summarize(conn: duckdb.DuckDBPyConnection, table: str) -> list[tuple[str, str, int]]:
    """Count rows per (browser, os) pair, most frequent first."""
    return conn.sql(
        f"""
        SELECT browser, os, count(*) AS n
        FROM {table}
        GROUP BY browser, os
        ORDER BY n DESC, browser, os
        """
    ).fetchall()


def common_root(paths: Sequence[Path]) -> Path:
    """Deepest directory containing every path in ``paths``."""
    return Path(os.path.commonpath([path.resolve().parent for path in paths]))


def connect(settings: Settings) -> duckdb.DuckDBPyConnection:
    conn = duckdb.connect(
        database=":memory:" if settings.database is None else str(settings.database)
    )
    if settings.threads:
        conn.execute(f"PRAGMA threads={settings.threads}")
    register_functions(conn)
    return conn


def classify_file(
    inputs: Sequence[Path],
    output: Path,
    settings: Settings | None = None,
    tracker: ProgressTracker | None = None,
) -> BatchResult:
    """Classify every line of ``inputs`` and write a TSV to ``output``.

    Parameters
    ----------
    inputs : Sequence[Path]
        Plain-text or ``.bz2`` files with one user agent per line.
    output : Path
        Destination TSV; parent directories are created.
    settings : Settings | None, optional
        Database, thread and decompression options. Defaults to
        ``Settings()``.
    tracker : ProgressTracker | None, optional
        Receives one step per stage (``BATCH_STEPS`` in total).

    Returns
    -------
    BatchResult
        Output path, row count and per-family counts.

    Raises
    ------
    FileNotFoundError
        If an input does not exist.
    ValueError
        If no inputs are given or an input is not a regular file.
    """
    settings = settings or Settings()
    files = validate_inputs(inputs)

    decompressor = Decompressor(
        cache_dir=settings.cache_dir,
        root=common_root(files),
        max_workers=settings.decompress_workers,
        force=settings.force_decompress,
    )
    prepared = decompressor.ensure_uncompressed(files, tracker=tracker)

    conn = connect(settings)
    try:
        rows = load_agents(conn, prepared)
        if tracker:
            tracker.step(f"loaded {rows} user agents", rows=rows)

        output.parent.mkdir(parents=True, exist_ok=True)
        conn.execute("CREATE OR REPLACE TABLE classified AS " + classified_query())
        logger.info("writing TSV -> {}", output)
        rel = conn.sql(
            "SELECT * EXCLUDE (file_no, line) FROM classified ORDER BY file_no, line"
        )
        rel.write_csv(str(output), sep="\t", header=True)
        if tracker:
            tracker.step(f"wrote {output}")

        summary = summarize(conn, "classified")
        if tracker:
            tracker.step(f"{len(summary)} browser/os combinations")
    finally:
        conn.close()

    return BatchResult(output=output, rows=rows, summary=summary)
