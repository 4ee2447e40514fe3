from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from ..core.constants import MOBILE_MAX_WIDTH, TABLET_MAX_WIDTH
from ..core.enums import Device

_MOBILE_UA = re.compile(r"android|iphone|ipod|blackberry|iemobile|opera mini")
_TABLET_UA = re.compile(r"ipad|tablet|playbook|silk")


@dataclass(frozen=True)
class DeviceInfo:
    """What the client reports about itself when it triggers an action."""

    viewport_width: Optional[int] = None
    user_agent: str = ""
    has_touch: bool = False


def classify_device(info: Optional[DeviceInfo]) -> Device:
    """Coarse device category from user agent, viewport width and touch input.

    Rules (first match wins):
    - mobile user agent, or a narrow viewport on a touch device -> Mobile
    - tablet user agent, or a medium viewport -> Tablet
    - otherwise Desktop (also when nothing is known)
    """

    if info is None:
        return Device.DESKTOP

    ua = (info.user_agent or "").lower()
    width = info.viewport_width

    is_mobile_viewport = width is not None and width <= MOBILE_MAX_WIDTH
    is_tablet_viewport = width is not None and MOBILE_MAX_WIDTH < width <= TABLET_MAX_WIDTH

    if _MOBILE_UA.search(ua) or (is_mobile_viewport and info.has_touch):
        return Device.MOBILE
    if _TABLET_UA.search(ua) or is_tablet_viewport:
        return Device.TABLET
    return Device.DESKTOP


def source_for_device(device: Optional[str]) -> str:
    """Map an employee-side device label onto the ledger's source tag."""
    return Device.MOBILE.value if "mobile" in str(device or "").lower() else Device.DESKTOP.value
