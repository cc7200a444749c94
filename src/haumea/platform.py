"""
Platform detection.

Only Android and iOS are supported targets. CPython reports both through
``sys.platform`` since 3.13; older Android builds also expose
``sys.getandroidapilevel``.
"""

import sys
from enum import Enum
from typing import Optional, Union


class Platform(str, Enum):
    ANDROID = "android"
    IOS = "ios"


def detect_platform() -> Optional[Platform]:
    """Return the platform this interpreter runs on, or None if unsupported."""
    if sys.platform == "android" or hasattr(sys, "getandroidapilevel"):
        return Platform.ANDROID
    if sys.platform == "ios":
        return Platform.IOS
    return None


def resolve_platform(value: Union[Platform, str, None]) -> Optional[Platform]:
    """Normalize an explicit platform value; None means auto-detect."""
    if value is None:
        return detect_platform()
    if isinstance(value, Platform):
        return value
    try:
        return Platform(str(value).strip().lower())
    except ValueError:
        return None
