import dataclasses

import pytest

from ua_classify import OS, classify
from ua_classify.rules import WINDOWS_NT_NAMES, detect_os


@pytest.mark.parametrize(
    "token, expected",
    [
        ("10.0", "10"),
        ("6.3", "8.1"),
        ("6.2", "8"),
        ("6.1", "7"),
        ("6.0", "Vista"),
        ("5.2", "XP"),
        ("5.1", "XP"),
        ("99.9", "99.9"),
        ("11.0", "11.0"),
    ],
)
def test_windows_nt_remap(token: str, expected: str) -> None:
    os = classify(f"Mozilla/5.0 (Windows NT {token}; Win64; x64)").os
    assert os.name == "windows"
    assert os.version == expected


def test_windows_without_nt_token():
    os = classify("Mozilla/4.0 (compatible; MSIE 5.5; Windows 98)").os
    assert os == OS("windows", "0")


def test_windows_nt_without_digits():
    assert detect_os("windows nt; foo").version == "0"


def test_windows_names_table():
    assert set(WINDOWS_NT_NAMES.values()) == {"10", "8.1", "8", "7", "Vista", "XP"}


@pytest.mark.parametrize(
    "user_agent, expected",
    [
        (
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15",
            ("macos", "10.15.7", "10"),
        ),
        (
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10.15; rv:121.0) Gecko/20100101",
            ("macos", "10.15", "10"),
        ),
        (
            "ExampleApp/2.3 (iPhone; iOS 17_1_2; Scale/3.00)",
            ("ios", "17.1.2", "17"),
        ),
        (
            "ExampleApp/2.3 (iPad; iOS 16_4; Scale/2.00)",
            ("ios", "16.4", "16"),
        ),
        (
            "ExampleApp/2.3 (iPod touch; iOS 9.3)",
            ("ios", "9", "9"),
        ),
        (
            "Mozilla/5.0 (Linux; Android 14; Pixel 8) AppleWebKit/537.36",
            ("android", "14", "14"),
        ),
        (
            "Mozilla/5.0 (Linux; Android 4.4.2; Nexus 7) AppleWebKit/537.36",
            ("android", "4.4.2", "4"),
        ),
        (
            "Mozilla/5.0 (X11; Ubuntu; Linux x86_64; rv:121.0) Gecko/20100101",
            ("linux", "0", "0"),
        ),
        ("Mozilla/5.0 (X11; CrOS x86_64 14541.0.0)", ("unknown", "0", "0")),
        ("", ("unknown", "0", "0")),
    ],
    ids=[
        "macos-underscores",
        "macos-dots",
        "ios-iphone",
        "ios-ipad",
        "ios-dotted-token-stops-at-dot",
        "android",
        "android-dotted",
        "linux",
        "chromeos-unknown",
        "empty",
    ],
)
def test_os(user_agent: str, expected: tuple[str, str, str]) -> None:
    os = classify(user_agent).os
    assert (os.name, os.version, os.major_version) == expected


def test_like_mac_os_x_takes_precedence_over_iphone():
    # Safari on iOS advertises "like Mac OS X" and is caught by the macos rule.
    os = classify(
        "Mozilla/5.0 (iPhone; CPU iPhone OS 17_1_2 like Mac OS X) "
        "AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.1.2 "
        "Mobile/15E148 Safari/604.1"
    ).os
    assert os == OS("macos", "0")


def test_android_checked_before_linux():
    assert classify("Linux; Android 12").os.name == "android"


@pytest.mark.parametrize(
    "version, major",
    [("10.15.7", "10"), ("7", "7"), ("Vista", "Vista"), ("0", "0"), (".5", "")],
)
def test_major_version(version: str, major: str) -> None:
    assert OS("macos", version).major_version == major


def test_major_version_not_settable():
    with pytest.raises(TypeError):
        OS("macos", "10.15", major_version="11")  # type: ignore[call-arg]
    os = OS("macos", "10.15")
    with pytest.raises(dataclasses.FrozenInstanceError):
        os.major_version = "11"  # type: ignore[misc]


def test_matches_is_case_insensitive():
    os = OS("windows", "10")
    assert os.matches("windows")
    assert os.matches("WINDOWS")
    assert os.matches("Windows")
    assert not os.matches("linux")


def test_os_str():
    assert str(OS("windows", "8.1")) == "windows 8.1"
