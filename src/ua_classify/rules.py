"""Ordered classification rules.

Each rule table is a tuple of ``(predicate, extractor)`` pairs evaluated in
order; the first predicate that accepts the normalized user agent decides the
result and later rules are never consulted. All functions here expect the
user agent to be lower-cased already.
"""

from __future__ import annotations

import re
from typing import Callable, Sequence, TypeVar

from .models import NO_VERSION, UNKNOWN, OS, Browser

T = TypeVar("T")

Predicate = Callable[[str], bool]
Rule = tuple[Predicate, Callable[[str], T]]

CHROME_VERSION = re.compile(r"chrome/([\d.]+)", re.IGNORECASE)
EDGE_VERSION = re.compile(r"edg(?:e)?/([\d.]+)", re.IGNORECASE)
FIREFOX_VERSION = re.compile(r"firefox/([\d.]+)", re.IGNORECASE)
SAFARI_VERSION = re.compile(r"version/([\d.]+)", re.IGNORECASE)
MSIE_VERSION = re.compile(r"msie ([\d.]+)", re.IGNORECASE)
TRIDENT_VERSION = re.compile(r"rv:([\d.]+)", re.IGNORECASE)
OPERA_VERSION = re.compile(r"opera/([\d.]+)", re.IGNORECASE)

WINDOWS_NT_VERSION = re.compile(r"windows nt ([\d.]+)", re.IGNORECASE)
MACOS_VERSION = re.compile(r"mac os x ([\d_.]+)", re.IGNORECASE)
IOS_VERSION = re.compile(r"os ([\d_]+)", re.IGNORECASE)
ANDROID_VERSION = re.compile(r"android ([\d.]+)", re.IGNORECASE)

# NT kernel token -> marketing name. Unlisted tokens are reported as-is.
WINDOWS_NT_NAMES: dict[str, str] = {
    "10.0": "10",
    "6.3": "8.1",
    "6.2": "8",
    "6.1": "7",
    "6.0": "Vista",
    "5.2": "XP",
    "5.1": "XP",
}


def extract_version(user_agent: str, pattern: re.Pattern[str]) -> str:
    """Return the first capture group of ``pattern`` or ``"0"`` on no match.

    Parameters
    ----------
    user_agent : str
        Normalized user-agent string.
    pattern : re.Pattern[str]
        Compiled pattern with exactly one capture group.

    Returns
    -------
    str
        Captured version text, verbatim.
    """
    match = pattern.search(user_agent)
    return match.group(1) if match else NO_VERSION


def contains(*tokens: str) -> Predicate:
    """Build a predicate accepting strings that contain any of ``tokens``."""
    return lambda user_agent: any(token in user_agent for token in tokens)


def first_match(rules: Sequence[Rule[T]], user_agent: str, default: T) -> T:
    """Run ``rules`` in order and return the first extractor's result."""
    for predicate, extract in rules:
        if predicate(user_agent):
            return extract(user_agent)
    return default


# Browsers ---------------------------------------------------------------


def _chrome(user_agent: str) -> Browser:
    # Chromium Edge and legacy EdgeHTML both advertise "chrome" as well.
    if "edg" in user_agent:
        return Browser("edge", extract_version(user_agent, EDGE_VERSION))
    return Browser("chrome", extract_version(user_agent, CHROME_VERSION))


def _firefox(user_agent: str) -> Browser:
    return Browser("firefox", extract_version(user_agent, FIREFOX_VERSION))


def _safari(user_agent: str) -> Browser:
    return Browser("safari", extract_version(user_agent, SAFARI_VERSION))


def _ie(user_agent: str) -> Browser:
    # IE11 drops the msie token and reports its revision under rv:
    pattern = MSIE_VERSION if "msie" in user_agent else TRIDENT_VERSION
    return Browser("ie", extract_version(user_agent, pattern))


def _opera(user_agent: str) -> Browser:
    pattern = SAFARI_VERSION if "version/" in user_agent else OPERA_VERSION
    return Browser("opera", extract_version(user_agent, pattern))


BROWSER_RULES: tuple[Rule[Browser], ...] = (
    (contains("chrome"), _chrome),
    (contains("firefox"), _firefox),
    (lambda ua: "safari" in ua and "chrome" not in ua, _safari),
    (contains("trident", "msie"), _ie),
    (contains("opera"), _opera),
)


def detect_browser(user_agent: str) -> Browser:
    """Classify the browser family and version of a normalized user agent."""
    return first_match(BROWSER_RULES, user_agent, Browser(UNKNOWN, NO_VERSION))


# Operating systems --------------------------------------------------------


def _windows(user_agent: str) -> OS:
    if "windows nt" not in user_agent:
        return OS("windows", NO_VERSION)
    token = extract_version(user_agent, WINDOWS_NT_VERSION)
    return OS("windows", WINDOWS_NT_NAMES.get(token, token))


def _macos(user_agent: str) -> OS:
    version = extract_version(user_agent, MACOS_VERSION)
    return OS("macos", version.replace("_", "."))


def _ios(user_agent: str) -> OS:
    version = extract_version(user_agent, IOS_VERSION)
    return OS("ios", version.replace("_", "."))


def _android(user_agent: str) -> OS:
    return OS("android", extract_version(user_agent, ANDROID_VERSION))


def _linux(user_agent: str) -> OS:
    return OS("linux", NO_VERSION)


OS_RULES: tuple[Rule[OS], ...] = (
    (contains("windows"), _windows),
    (contains("mac os x"), _macos),
    (contains("iphone", "ipad", "ipod"), _ios),
    (contains("android"), _android),
    (contains("linux"), _linux),
)


def detect_os(user_agent: str) -> OS:
    """Classify the operating system of a normalized user agent."""
    return first_match(OS_RULES, user_agent, OS(UNKNOWN, NO_VERSION))


# Device class -----------------------------------------------------------


def is_mobile(user_agent: str, os: OS) -> bool:
    """Mobile if the string says so or the OS is iOS or a non-tablet Android."""
    return (
        "mobi" in user_agent
        or os.name == "ios"
        or (os.name == "android" and "tablet" not in user_agent)
    )


def is_tablet(user_agent: str) -> bool:
    """Tablet if the string names one or is Android without a mobile token.

    Evaluated independently of :func:`is_mobile`; both may hold at once.
    """
    return (
        "tablet" in user_agent
        or "ipad" in user_agent
        or ("android" in user_agent and "mobi" not in user_agent)
    )
