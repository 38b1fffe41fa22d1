import dataclasses
from concurrent.futures import ThreadPoolExecutor

import pytest

from ua_classify import (
    OS,
    Browser,
    Classification,
    StaticEnvironment,
    UserAgentClassifier,
    classify,
)

CHROME_WINDOWS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
SAFARI_MAC = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.1 Safari/605.1.15"
)
ANDROID_PHONE = (
    "Mozilla/5.0 (Linux; Android 14; Pixel 8) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Mobile Safari/537.36"
)

SAMPLES = [CHROME_WINDOWS, SAFARI_MAC, ANDROID_PHONE, "", "curl/8.4.0"]


def test_classify_full_result():
    result = classify(CHROME_WINDOWS)
    assert result == Classification(
        user_agent=CHROME_WINDOWS.lower(),
        browser=Browser("chrome", "120.0.0.0"),
        os=OS("windows", "10"),
        mobile=False,
        tablet=False,
    )


def test_empty_string():
    result = classify("")
    assert result.browser.name == "unknown"
    assert result.browser.version == "0"
    assert result.os.name == "unknown"
    assert result.os.version == "0"
    assert result.mobile is False
    assert result.tablet is False


def test_none_is_treated_as_empty():
    assert classify(None) == classify("")


@pytest.mark.parametrize("user_agent", SAMPLES)
def test_idempotent(user_agent: str) -> None:
    assert classify(user_agent) == classify(user_agent)


@pytest.mark.parametrize("user_agent", SAMPLES)
def test_case_insensitive(user_agent: str) -> None:
    expected = classify(user_agent)
    assert classify(user_agent.upper()) == expected
    assert classify(user_agent.swapcase()) == expected


@pytest.mark.parametrize(
    "garbage",
    [
        "\x00\x01\x02",
        "☃☃☃ 🚀",
        "chrome/" * 1000,
        "windows nt " + "9" * 500,
        "(((((",
        "mac os x ____",
        "   ",
    ],
)
def test_garbage_never_raises(garbage: str) -> None:
    result = classify(garbage)
    assert isinstance(result.browser, Browser)
    assert isinstance(result.os, OS)
    assert isinstance(result.mobile, bool)
    assert isinstance(result.tablet, bool)


def test_input_is_not_trimmed():
    assert classify("  Chrome/1.0  ").user_agent == "  chrome/1.0  "


def test_result_is_frozen():
    result = classify(CHROME_WINDOWS)
    with pytest.raises(dataclasses.FrozenInstanceError):
        result.mobile = True  # type: ignore[misc]


def test_as_dict():
    assert classify(ANDROID_PHONE).as_dict() == {
        "user_agent": ANDROID_PHONE.lower(),
        "browser": "chrome",
        "browser_version": "120.0.0.0",
        "os": "android",
        "os_version": "14",
        "os_major_version": "14",
        "mobile": True,
        "tablet": False,
    }


def test_concurrent_calls_match_serial():
    inputs = SAMPLES * 50
    with ThreadPoolExecutor(max_workers=8) as executor:
        results = list(executor.map(classify, inputs))
    assert results == [classify(ua) for ua in inputs]


class TestUserAgentClassifier:
    def test_explicit_string(self):
        classifier = UserAgentClassifier(SAFARI_MAC)
        assert classifier.browser == Browser("safari", "17.1")
        assert classifier.os == OS("macos", "10.15.7")
        assert classifier.os.major_version == "10"
        assert classifier.mobile is False
        assert classifier.tablet is False
        assert classifier.user_agent == SAFARI_MAC.lower()

    def test_falls_back_to_environment(self):
        environment = StaticEnvironment(agent=ANDROID_PHONE)
        classifier = UserAgentClassifier(environment=environment)
        assert classifier.os.name == "android"
        assert classifier.mobile is True

    def test_explicit_string_ignores_environment(self):
        environment = StaticEnvironment(agent=ANDROID_PHONE)
        classifier = UserAgentClassifier("", environment=environment)
        assert classifier.os.name == "unknown"

    def test_default_environment_reads_process(self, monkeypatch):
        monkeypatch.setenv("HTTP_USER_AGENT", CHROME_WINDOWS)
        classifier = UserAgentClassifier()
        assert classifier.browser.name == "chrome"

    def test_default_environment_without_variable(self, monkeypatch):
        monkeypatch.delenv("HTTP_USER_AGENT", raising=False)
        classifier = UserAgentClassifier()
        assert classifier.result == classify("")

    def test_reassignment_replaces_everything(self):
        classifier = UserAgentClassifier(CHROME_WINDOWS)
        before = classifier.result

        classifier.user_agent = ANDROID_PHONE

        after = classifier.result
        assert after is not before
        assert after == classify(ANDROID_PHONE)
        assert before == classify(CHROME_WINDOWS)
        assert classifier.os.name == "android"
        assert classifier.mobile is True

    def test_repr(self):
        classifier = UserAgentClassifier(CHROME_WINDOWS)
        assert repr(classifier) == (
            "UserAgentClassifier(browser=chrome 120.0.0.0, os=windows 10, "
            "mobile=False, tablet=False)"
        )
