"""User-agent classification and the "is this a new device" heuristic.

Both functions are deliberately coarse. They feed login notifications only
and are not an authentication control.
"""
from dataclasses import dataclass
from typing import Iterable, Optional

DESKTOP = "Desktop"
MOBILE_DEVICE = "Mobile Device"
TABLET = "Tablet"
UNKNOWN_BROWSER = "Unknown Browser"
UNKNOWN_OS = "Unknown OS"

_MOBILE_MARKERS = ("mobile", "android", "iphone", "ipad")


@dataclass(frozen=True)
class DeviceInfo:
    device_type: str = DESKTOP
    browser: str = UNKNOWN_BROWSER
    os: str = UNKNOWN_OS
    is_mobile: bool = False

    def to_dict(self) -> dict:
        return {
            "device_type": self.device_type,
            "browser": self.browser,
            "os": self.os,
            "is_mobile": self.is_mobile,
        }


def _detect_browser(ua: str) -> str:
    # Edge and Opera embed "chrome" and "safari", so order matters
    if "edg" in ua:
        return "Edge"
    if "chrome" in ua:
        return "Chrome"
    if "firefox" in ua:
        return "Firefox"
    if "safari" in ua:
        return "Safari"
    if "opera" in ua:
        return "Opera"
    if "brave" in ua:
        return "Brave"
    return UNKNOWN_BROWSER


def _detect_os(ua: str) -> str:
    if "windows" in ua:
        return "Windows"
    if "android" in ua:
        return "Android"
    if "iphone" in ua or "ipad" in ua:
        return "iOS"
    if "mac" in ua:
        return "macOS"
    if "linux" in ua:
        return "Linux"
    if "ios" in ua:
        return "iOS"
    return UNKNOWN_OS


def parse_user_agent(user_agent: Optional[str]) -> DeviceInfo:
    if not user_agent or not isinstance(user_agent, str):
        return DeviceInfo()

    ua = user_agent.lower()

    if any(marker in ua for marker in _MOBILE_MARKERS):
        device_type, is_mobile = MOBILE_DEVICE, True
    elif "tablet" in ua:
        device_type, is_mobile = TABLET, True
    else:
        device_type, is_mobile = DESKTOP, False

    return DeviceInfo(
        device_type=device_type,
        browser=_detect_browser(ua),
        os=_detect_os(ua),
        is_mobile=is_mobile,
    )


def _same_device(current: DeviceInfo, previous: DeviceInfo) -> bool:
    if current.is_mobile and previous.is_mobile:
        return current.os == previous.os
    if not current.is_mobile and not previous.is_mobile:
        return current.browser == previous.browser and current.os == previous.os
    return False


def is_new_device(current_user_agent: Optional[str], previous_user_agents: Iterable[Optional[str]]) -> bool:
    """Return True unless some previously seen user agent looks like the same device.

    An empty history always counts as new (first ever login).
    """
    previous_user_agents = list(previous_user_agents)
    if not previous_user_agents:
        return True

    current = parse_user_agent(current_user_agent)
    for previous_user_agent in previous_user_agents:
        if _same_device(current, parse_user_agent(previous_user_agent)):
            return False
    return True
