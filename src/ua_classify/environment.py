"""Host environment access.

The classifier only ever needs one thing from its host: the live user-agent
string, used when the caller does not pass one explicitly. Capability probes
(touch, WebGL, local storage, fetch, workers) are answered by the host as
well and are exposed here behind a single interface so they can be faked in
tests.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, Mapping, Protocol, runtime_checkable

from loguru import logger

from .config import TRUTHY

USER_AGENT_KEY = "HTTP_USER_AGENT"
CAPABILITY_PREFIX = "UA_CLASSIFY_HAS_"

PROBES: tuple[str, ...] = (
    "has_touch",
    "has_webgl",
    "has_local_storage",
    "has_fetch",
    "has_web_workers",
)


@runtime_checkable
class Environment(Protocol):
    """What a host runtime must answer."""

    def user_agent(self) -> str: ...

    def has_touch(self) -> bool: ...

    def has_webgl(self) -> bool: ...

    def has_local_storage(self) -> bool: ...

    def has_fetch(self) -> bool: ...

    def has_web_workers(self) -> bool: ...


@dataclass(frozen=True)
class StaticEnvironment:
    """Environment with fixed answers.

    Examples
    --------
    >>> env = StaticEnvironment(agent="Mozilla/5.0 (iPhone)", touch=True)
    >>> env.user_agent()
    'Mozilla/5.0 (iPhone)'
    >>> env.has_touch()
    True
    """

    agent: str = ""
    touch: bool = False
    webgl: bool = False
    local_storage: bool = False
    fetch: bool = False
    web_workers: bool = False

    def user_agent(self) -> str:
        return self.agent

    def has_touch(self) -> bool:
        return self.touch

    def has_webgl(self) -> bool:
        return self.webgl

    def has_local_storage(self) -> bool:
        return self.local_storage

    def has_fetch(self) -> bool:
        return self.fetch

    def has_web_workers(self) -> bool:
        return self.web_workers


class ProcessEnvironment:
    """Environment backed by a CGI/WSGI style variable mapping.

    The user agent comes from ``HTTP_USER_AGENT``; capabilities come from
    ``UA_CLASSIFY_HAS_TOUCH``, ``UA_CLASSIFY_HAS_WEBGL`` and so on, which a
    front end can forward from client-side probes.

    Parameters
    ----------
    environ : Mapping[str, str] | None, optional
        Variables to read. Defaults to ``os.environ``; pass a WSGI
        ``environ`` to classify a request.
    """

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self.environ = os.environ if environ is None else environ

    def user_agent(self) -> str:
        return self.environ.get(USER_AGENT_KEY, "")

    def _flag(self, name: str) -> bool:
        value = self.environ.get(CAPABILITY_PREFIX + name.upper())
        return value is not None and value.strip().lower() in TRUTHY

    def has_touch(self) -> bool:
        return self._flag("touch")

    def has_webgl(self) -> bool:
        return self._flag("webgl")

    def has_local_storage(self) -> bool:
        return self._flag("local_storage")

    def has_fetch(self) -> bool:
        return self._flag("fetch")

    def has_web_workers(self) -> bool:
        return self._flag("web_workers")


def fail_closed(name: str, probe: Callable[[], bool]) -> bool:
    """Run ``probe`` and turn any exception into ``False``."""
    try:
        return bool(probe())
    except Exception as exc:  # pylint: disable=broad-except
        logger.warning("capability probe {} failed: {}", name, exc)
        return False


class FeatureDetector:
    """Capability queries that never raise.

    Parameters
    ----------
    environment : Environment | None, optional
        Host to query. Defaults to :class:`ProcessEnvironment`.
    """

    def __init__(self, environment: Environment | None = None) -> None:
        self.environment = (
            ProcessEnvironment() if environment is None else environment
        )

    def has_touch(self) -> bool:
        return fail_closed("has_touch", self.environment.has_touch)

    def has_webgl(self) -> bool:
        return fail_closed("has_webgl", self.environment.has_webgl)

    def has_local_storage(self) -> bool:
        return fail_closed("has_local_storage", self.environment.has_local_storage)

    def has_fetch(self) -> bool:
        return fail_closed("has_fetch", self.environment.has_fetch)

    def has_web_workers(self) -> bool:
        return fail_closed("has_web_workers", self.environment.has_web_workers)

    def as_dict(self) -> dict[str, bool]:
        return {name: getattr(self, name)() for name in PROBES}
