"""AndroidManifest.xml and Gradle build file parsers."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Pattern, Tuple
from xml.etree import ElementTree

from ..logging import get_logger
from ._io import read_text

_LOGGER = get_logger("parsers.manifest")


@dataclass
class Activity:
    """An ``<activity>`` entry; ``exported`` is None when the attribute is absent."""

    name: str
    exported: Optional[bool] = None
    has_intent_filter: bool = False


@dataclass
class AndroidManifest:
    """Subset of AndroidManifest.xml consumed by the Android checks."""

    package: str = ""
    version_code: str = ""
    version_name: str = ""
    debuggable: bool = False
    allow_backup: bool = True
    permissions: List[str] = field(default_factory=list)
    features: List[str] = field(default_factory=list)
    activities: List[Activity] = field(default_factory=list)
    queries_packages: List[str] = field(default_factory=list)

    def has_permission(self, fragment: str) -> bool:
        return any(fragment in permission for permission in self.permissions)

    def has_feature(self, fragment: str) -> bool:
        return any(fragment in feature for feature in self.features)

    def has_query_package(self, fragment: str) -> bool:
        return any(fragment in package for package in self.queries_packages)


@dataclass
class GradleConfig:
    """Fields pulled out of ``android/app/build.gradle(.kts)``.

    SDK levels and the version code stay strings: Gradle files use both bare
    integers and quoted literals, and Flutter templates often reference
    ``flutter.minSdkVersion`` instead of a number.
    """

    application_id: str = ""
    min_sdk_version: str = ""
    target_sdk_version: str = ""
    version_code: str = ""
    version_name: str = ""
    ndk_version: str = ""


def _local_name(tag: str) -> str:
    if "}" in tag:
        tag = tag.rsplit("}", 1)[1]
    if tag.startswith("android:"):
        tag = tag[len("android:"):]
    return tag


def _attributes(element: ElementTree.Element) -> Dict[str, str]:
    return {_local_name(key): value for key, value in element.attrib.items()}


def parse_android_manifest(path: Path) -> AndroidManifest:
    """Parse the manifest at ``path``; malformed XML yields what was read so far."""
    manifest = AndroidManifest()
    text = read_text(path, _LOGGER)
    if text is None:
        return manifest

    current_activity: Optional[Activity] = None
    in_queries = False
    parser = ElementTree.XMLPullParser(events=("start", "end"))
    try:
        parser.feed(text)
        parser.close()
    except ElementTree.ParseError as exc:
        _LOGGER.warning("Malformed manifest %s: %s", path, exc)

    try:
        for event, element in parser.read_events():
            tag = _local_name(element.tag)
            if event == "end":
                if tag == "activity":
                    current_activity = None
                elif tag == "queries":
                    in_queries = False
                continue

            attrs = _attributes(element)
            if tag == "manifest":
                manifest.package = attrs.get("package", "")
                manifest.version_code = attrs.get("versionCode", "")
                manifest.version_name = attrs.get("versionName", "")
            elif tag == "uses-permission":
                manifest.permissions.append(attrs.get("name", ""))
            elif tag == "uses-feature":
                manifest.features.append(attrs.get("name", ""))
            elif tag == "application":
                manifest.debuggable = attrs.get("debuggable", "").lower() == "true"
                manifest.allow_backup = attrs.get("allowBackup", "").lower() != "false"
            elif tag == "activity":
                exported_raw = attrs.get("exported")
                exported = None if exported_raw is None else exported_raw.lower() == "true"
                current_activity = Activity(name=attrs.get("name", ""), exported=exported)
                manifest.activities.append(current_activity)
            elif tag == "intent-filter" and current_activity is not None:
                current_activity.has_intent_filter = True
            elif tag == "queries":
                in_queries = True
            elif tag == "package" and in_queries:
                manifest.queries_packages.append(attrs.get("name", ""))
    except ElementTree.ParseError as exc:
        _LOGGER.warning("Malformed manifest %s: %s", path, exc)
    return manifest


# (field, groovy pattern, kotlin pattern); the first match wins per field.
_GRADLE_PATTERNS: Tuple[Tuple[str, Pattern[str], Pattern[str]], ...] = (
    (
        "application_id",
        re.compile(r"applicationId\s+[\"']([^\"']+)[\"']"),
        re.compile(r"applicationId\s*=\s*[\"']([^\"']+)[\"']"),
    ),
    (
        "min_sdk_version",
        re.compile(r"minSdk(?:Version)?\s+(\d+)"),
        re.compile(r"minSdk(?:Version)?\s*=\s*[\"']?(\d+)[\"']?"),
    ),
    (
        "target_sdk_version",
        re.compile(r"targetSdk(?:Version)?\s+(\d+)"),
        re.compile(r"targetSdk(?:Version)?\s*=\s*[\"']?(\d+)[\"']?"),
    ),
    (
        "version_code",
        re.compile(r"versionCode\s+(\d+)"),
        re.compile(r"versionCode\s*=\s*[\"']?(\d+)[\"']?"),
    ),
    (
        "version_name",
        re.compile(r"versionName\s+[\"']([^\"']+)[\"']"),
        re.compile(r"versionName\s*=\s*[\"']([^\"']+)[\"']"),
    ),
    (
        "ndk_version",
        re.compile(r"ndkVersion\s+[\"']([^\"']+)[\"']"),
        re.compile(r"ndkVersion\s*=\s*[\"']([^\"']+)[\"']"),
    ),
)


def parse_gradle(path: Path) -> GradleConfig:
    """Parse a Groovy or Kotlin (``.kts``) Gradle build file."""
    config = GradleConfig()
    text = read_text(path, _LOGGER)
    if text is None:
        return config

    kotlin = path.suffix == ".kts"
    for attribute, groovy, kts in _GRADLE_PATTERNS:
        match = (kts if kotlin else groovy).search(text)
        if match:
            setattr(config, attribute, match.group(1))
    return config


__all__ = [
    "Activity",
    "AndroidManifest",
    "GradleConfig",
    "parse_android_manifest",
    "parse_gradle",
]
