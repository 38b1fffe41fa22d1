"""DuckDB scalar functions over :func:`ua_classify.classify`.

After :func:`register_functions`, SQL can segment raw logs directly::

    SELECT ua_browser(agent) AS browser, count(*)
    FROM requests GROUP BY 1;
"""

from __future__ import annotations

from typing import Callable

import duckdb
from duckdb.sqltypes import BOOLEAN, VARCHAR
from loguru import logger

from .classifier import classify


def ua_browser(user_agent: str) -> str:
    return classify(user_agent).browser.name


def ua_browser_version(user_agent: str) -> str:
    return classify(user_agent).browser.version


def ua_os(user_agent: str) -> str:
    return classify(user_agent).os.name


def ua_os_version(user_agent: str) -> str:
    return classify(user_agent).os.version


def ua_os_major_version(user_agent: str) -> str:
    return classify(user_agent).os.major_version


def ua_mobile(user_agent: str) -> bool:
    return classify(user_agent).mobile


def ua_tablet(user_agent: str) -> bool:
    return classify(user_agent).tablet


# SQL name -> (function, return type); column order of batch output.
FUNCTIONS: dict[str, tuple[Callable[[str], str | bool], duckdb.DuckDBPyType]] = {
    "ua_browser": (ua_browser, VARCHAR),
    "ua_browser_version": (ua_browser_version, VARCHAR),
    "ua_os": (ua_os, VARCHAR),
    "ua_os_version": (ua_os_version, VARCHAR),
    "ua_os_major_version": (ua_os_major_version, VARCHAR),
    "ua_mobile": (ua_mobile, BOOLEAN),
    "ua_tablet": (ua_tablet, BOOLEAN),
}


def register_functions(conn: duckdb.DuckDBPyConnection) -> list[str]:
    """Register every ``ua_*`` function on ``conn``.

    Parameters
    ----------
    conn : duckdb.DuckDBPyConnection
        Connection to register on. Registration is per connection.

    Returns
    -------
    list[str]
        SQL names that were registered.
    """
    for name, (function, return_type) in FUNCTIONS.items():
        conn.create_function(name, function, [VARCHAR], return_type)
    logger.info("registered {} user-agent functions", len(FUNCTIONS))
    return list(FUNCTIONS)
