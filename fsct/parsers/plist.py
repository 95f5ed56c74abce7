"""Regex-based Info.plist reader.

Only presence matters to the checks, so this does not attempt a conformant
plist parse: it looks for ``<key>K</key>`` followed by a ``<string>`` or a
boolean element.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from ..logging import get_logger
from ._io import read_text

_LOGGER = get_logger("parsers.plist")

CAMERA = "NSCameraUsageDescription"
PHOTO_LIBRARY = "NSPhotoLibraryUsageDescription"
MICROPHONE = "NSMicrophoneUsageDescription"
LOCATION_WHEN_IN_USE = "NSLocationWhenInUseUsageDescription"
LOCATION_ALWAYS = "NSLocationAlwaysAndWhenInUseUsageDescription"
CONTACTS = "NSContactsUsageDescription"
CALENDARS = "NSCalendarsUsageDescription"

USAGE_DESCRIPTION_KEYS = (
    CAMERA,
    PHOTO_LIBRARY,
    MICROPHONE,
    LOCATION_WHEN_IN_USE,
    LOCATION_ALWAYS,
    CONTACTS,
    CALENDARS,
    "NSRemindersUsageDescription",
    "NSBluetoothAlwaysUsageDescription",
    "NSBluetoothPeripheralUsageDescription",
    "NSAppleMusicUsageDescription",
    "NSHealthShareUsageDescription",
    "NSHealthUpdateUsageDescription",
    "NSSiriUsageDescription",
    "NSUserTrackingUsageDescription",
)

_BUNDLE_KEYS = {
    "bundle_identifier": "CFBundleIdentifier",
    "bundle_display_name": "CFBundleDisplayName",
    "bundle_version": "CFBundleVersion",
    "bundle_short_version": "CFBundleShortVersionString",
    "bundle_name": "CFBundleName",
}


def _string_pattern(key: str) -> "re.Pattern[str]":
    return re.compile(rf"<key>{key}</key>\s*<string>([^<]*)</string>")


def _bool_pattern(key: str) -> "re.Pattern[str]":
    return re.compile(rf"<key>{key}</key>\s*<([a-z]+)\s*/?>")


_STRING_PATTERNS = {key: _string_pattern(key) for key in (*_BUNDLE_KEYS.values(), *USAGE_DESCRIPTION_KEYS)}
_ENCRYPTION_PATTERN = _bool_pattern("ITSAppUsesNonExemptEncryption")
_FULL_SCREEN_PATTERN = _bool_pattern("UIRequiresFullScreen")


@dataclass
class InfoPlist:
    """Bundle metadata plus usage descriptions keyed by plist key.

    ``usage_descriptions`` keeps keys that are present with an empty string so
    blank descriptions can be reported separately from missing ones.
    """

    bundle_identifier: str = ""
    bundle_display_name: str = ""
    bundle_version: str = ""
    bundle_short_version: str = ""
    bundle_name: str = ""
    usage_descriptions: Dict[str, str] = field(default_factory=dict)
    uses_non_exempt_encryption: Optional[bool] = None
    requires_full_screen_value: Optional[bool] = None

    def has_usage_description(self, key: str) -> bool:
        if key in (LOCATION_WHEN_IN_USE, LOCATION_ALWAYS):
            return self.has_location_description
        return bool(self.usage_descriptions.get(key))

    @property
    def has_camera_description(self) -> bool:
        return bool(self.usage_descriptions.get(CAMERA))

    @property
    def has_photo_library_description(self) -> bool:
        return bool(self.usage_descriptions.get(PHOTO_LIBRARY))

    @property
    def has_location_description(self) -> bool:
        return bool(
            self.usage_descriptions.get(LOCATION_WHEN_IN_USE)
            or self.usage_descriptions.get(LOCATION_ALWAYS)
        )

    @property
    def has_microphone_description(self) -> bool:
        return bool(self.usage_descriptions.get(MICROPHONE))

    @property
    def has_contacts_description(self) -> bool:
        return bool(self.usage_descriptions.get(CONTACTS))

    @property
    def has_calendars_description(self) -> bool:
        return bool(self.usage_descriptions.get(CALENDARS))

    @property
    def encryption_declared(self) -> bool:
        return self.uses_non_exempt_encryption is not None

    @property
    def requires_full_screen(self) -> bool:
        return bool(self.requires_full_screen_value)


def parse_info_plist(path: Path) -> InfoPlist:
    plist = InfoPlist()
    text = read_text(path, _LOGGER)
    if text is None:
        return plist

    for attribute, key in _BUNDLE_KEYS.items():
        match = _STRING_PATTERNS[key].search(text)
        if match:
            setattr(plist, attribute, match.group(1).strip())

    for key in USAGE_DESCRIPTION_KEYS:
        match = _STRING_PATTERNS[key].search(text)
        if match:
            plist.usage_descriptions[key] = match.group(1).strip()

    match = _ENCRYPTION_PATTERN.search(text)
    if match:
        plist.uses_non_exempt_encryption = match.group(1) == "true"
    match = _FULL_SCREEN_PATTERN.search(text)
    if match:
        plist.requires_full_screen_value = match.group(1) == "true"
    return plist


__all__ = [
    "CAMERA",
    "CALENDARS",
    "CONTACTS",
    "InfoPlist",
    "LOCATION_ALWAYS",
    "LOCATION_WHEN_IN_USE",
    "MICROPHONE",
    "PHOTO_LIBRARY",
    "USAGE_DESCRIPTION_KEYS",
    "parse_info_plist",
]
