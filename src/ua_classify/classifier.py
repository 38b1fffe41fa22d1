"""User-agent classification entry points."""

from __future__ import annotations

import threading

from .environment import Environment, ProcessEnvironment
from .models import OS, Browser, Classification
from .rules import detect_browser, detect_os, is_mobile, is_tablet


def normalize(user_agent: str | None) -> str:
    """Lower-case ``user_agent``; ``None`` becomes the empty string."""
    return (user_agent or "").lower()


def classify(user_agent: str | None) -> Classification:
    """Classify a raw user-agent string.

    Parameters
    ----------
    user_agent : str | None
        Raw ``User-Agent`` header value. Case does not matter.

    Returns
    -------
    Classification
        Browser, OS and device-class flags. Unrecognized input yields
        ``unknown`` names and ``"0"`` versions; this function never raises.

    Examples
    --------
    >>> result = classify(
    ...     "Mozilla/5.0 (Linux; Android 14; Pixel 8) AppleWebKit/537.36 "
    ...     "(KHTML, like Gecko) Chrome/120.0.0.0 Mobile Safari/537.36"
    ... )
    >>> result.browser.name, result.os.version, result.mobile, result.tablet
    ('chrome', '14', True, False)
    """
    normalized = normalize(user_agent)
    browser = detect_browser(normalized)
    os = detect_os(normalized)
    return Classification(
        user_agent=normalized,
        browser=browser,
        os=os,
        mobile=is_mobile(normalized, os),
        tablet=is_tablet(normalized),
    )


class UserAgentClassifier:
    """Holds the classification of the most recently assigned user agent.

    Assigning :attr:`user_agent` reclassifies and swaps the whole result at
    once, so concurrent readers see either the old or the new result.

    Parameters
    ----------
    user_agent : str | None, optional
        String to classify. When omitted, ``environment.user_agent()`` is
        used instead.
    environment : Environment | None, optional
        Host accessor consulted only when ``user_agent`` is omitted.
        Defaults to :class:`~ua_classify.environment.ProcessEnvironment`.
    """

    def __init__(
        self,
        user_agent: str | None = None,
        environment: Environment | None = None,
    ) -> None:
        self._lock = threading.Lock()
        if user_agent is None:
            if environment is None:
                environment = ProcessEnvironment()
            user_agent = environment.user_agent()
        self._result = classify(user_agent)

    @property
    def user_agent(self) -> str:
        return self.result.user_agent

    @user_agent.setter
    def user_agent(self, value: str) -> None:
        result = classify(value)
        with self._lock:
            self._result = result

    @property
    def result(self) -> Classification:
        with self._lock:
            return self._result

    @property
    def browser(self) -> Browser:
        return self.result.browser

    @property
    def os(self) -> OS:
        return self.result.os

    @property
    def mobile(self) -> bool:
        return self.result.mobile

    @property
    def tablet(self) -> bool:
        return self.result.tablet

    def __repr__(self) -> str:
        result = self.result
        return (
            f"{type(self).__name__}(browser={result.browser}, os={result.os}, "
            f"mobile={result.mobile}, tablet={result.tablet})"
        )
