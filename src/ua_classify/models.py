"""Value types produced by user-agent classification.

All records are frozen: a classification is recomputed in full whenever the
input string changes, never patched in place.
"""

from __future__ import annotations

from dataclasses import dataclass, field

UNKNOWN = "unknown"
NO_VERSION = "0"


@dataclass(frozen=True)
class Browser:
    """Detected browser.

    Attributes
    ----------
    name : str
        One of ``chrome``, ``edge``, ``firefox``, ``safari``, ``ie``,
        ``opera`` or ``unknown``.
    version : str
        Dotted version string, or ``"0"`` when it could not be extracted.
    """

    name: str = UNKNOWN
    version: str = NO_VERSION

    def __str__(self) -> str:
        return f"{self.name} {self.version}"


def major_version(version: str) -> str:
    """Return the leading dot-delimited component of ``version``."""
    head, _, _ = version.partition(".")
    return head


@dataclass(frozen=True)
class OS:
    """Detected operating system.

    Attributes
    ----------
    name : str
        One of ``windows``, ``macos``, ``ios``, ``android``, ``linux`` or
        ``unknown``.
    version : str
        Version string. Windows NT build tokens are remapped to marketing
        names (``6.1`` -> ``7``).
    major_version : str
        Everything before the first ``.`` in ``version``. Derived, not
        accepted by the constructor.
    """

    name: str = UNKNOWN
    version: str = NO_VERSION
    major_version: str = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "major_version", major_version(self.version))

    def matches(self, candidate: str) -> bool:
        """Case-insensitive comparison of ``candidate`` against ``name``."""
        return self.name.lower() == candidate.lower()

    def __str__(self) -> str:
        return f"{self.name} {self.version}"


@dataclass(frozen=True)
class Classification:
    """Result of classifying one user-agent string.

    ``mobile`` and ``tablet`` are evaluated independently and may both be
    true (or both false) for the same string.
    """

    user_agent: str
    browser: Browser
    os: OS
    mobile: bool
    tablet: bool

    def as_dict(self) -> dict[str, str | bool]:
        """Flatten into the column layout used by the CLI and batch writers."""
        return {
            "user_agent": self.user_agent,
            "browser": self.browser.name,
            "browser_version": self.browser.version,
            "os": self.os.name,
            "os_version": self.os.version,
            "os_major_version": self.os.major_version,
            "mobile": self.mobile,
            "tablet": self.tablet,
        }
