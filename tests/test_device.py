"""User-agent classification and new-device detection."""
import pytest

from app.utils.device import DeviceInfo, is_new_device, parse_user_agent

CHROME_WINDOWS = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0 Safari/537.36"
FIREFOX_WINDOWS = "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0"
CHROME_MAC = "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0 Safari/537.36"
EDGE_WINDOWS = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0 Safari/537.36 Edg/120.0"
SAFARI_IPHONE = "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1"
CHROME_ANDROID = "Mozilla/5.0 (Linux; Android 14; Pixel 8) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0 Mobile Safari/537.36"
FIREFOX_ANDROID = "Mozilla/5.0 (Android 14; Mobile; rv:121.0) Gecko/121.0 Firefox/121.0"


@pytest.mark.parametrize("user_agent", [None, "", "   ", "garbage-agent", "12345", "\x00\x01"])
def test_unrecognised_user_agents_fall_back(user_agent):
    assert parse_user_agent(user_agent) == DeviceInfo(
        device_type="Desktop", browser="Unknown Browser", os="Unknown OS", is_mobile=False
    )


def test_parse_desktop_chrome_on_windows():
    info = parse_user_agent(CHROME_WINDOWS)
    assert info.device_type == "Desktop"
    assert info.browser == "Chrome"
    assert info.os == "Windows"
    assert info.is_mobile is False


def test_edge_wins_over_chrome():
    assert parse_user_agent(EDGE_WINDOWS).browser == "Edge"


def test_safari_on_iphone_is_mobile_ios():
    info = parse_user_agent(SAFARI_IPHONE)
    assert info.device_type == "Mobile Device"
    assert info.is_mobile is True
    assert info.browser == "Safari"
    assert info.os == "iOS"


def test_android_is_not_reported_as_linux():
    info = parse_user_agent(CHROME_ANDROID)
    assert info.os == "Android"
    assert info.browser == "Chrome"
    assert info.is_mobile is True


def test_tablet_marker():
    info = parse_user_agent("SomeVendor Tablet Browser")
    assert info.device_type == "Tablet"
    assert info.is_mobile is True


def test_parsing_is_case_insensitive():
    assert parse_user_agent(CHROME_WINDOWS.upper()) == parse_user_agent(CHROME_WINDOWS)


def test_empty_history_is_always_new():
    assert is_new_device(CHROME_WINDOWS, []) is True
    assert is_new_device(None, []) is True


def test_same_desktop_browser_and_os_is_known():
    assert is_new_device(CHROME_WINDOWS, [CHROME_WINDOWS.replace("120.0", "119.0")]) is False


def test_desktop_browser_change_is_new():
    assert is_new_device(FIREFOX_WINDOWS, [CHROME_WINDOWS]) is True


def test_desktop_os_change_is_new():
    assert is_new_device(CHROME_MAC, [CHROME_WINDOWS]) is True


def test_mobile_matches_on_os_only():
    assert is_new_device(FIREFOX_ANDROID, [CHROME_ANDROID]) is False


def test_mixed_mobility_never_matches():
    assert is_new_device(SAFARI_IPHONE, ["Mozilla/5.0 (Macintosh; Intel Mac OS X) Safari/605"]) is True


def test_windows_then_iphone_is_new_device():
    history = ["Mozilla/5.0 (Windows NT 10.0) Chrome/120 Safari/537"]
    assert is_new_device("Mozilla/5.0 (iPhone) Safari/604", history) is True


def test_any_matching_history_entry_is_enough():
    history = [SAFARI_IPHONE, FIREFOX_WINDOWS, CHROME_WINDOWS]
    assert is_new_device(CHROME_WINDOWS, history) is False
