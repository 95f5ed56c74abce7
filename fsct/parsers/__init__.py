"""Tolerant parsers for Flutter project artifacts."""

from __future__ import annotations

from .dart import Match, SourceFile, SourceScanner, discover_source_files
from .manifest import Activity, AndroidManifest, GradleConfig, parse_android_manifest, parse_gradle
from .plist import InfoPlist, parse_info_plist
from .pubspec import Pubspec, parse_pubspec
from .resources import LauncherIcon, scan_launcher_icons
from .xcode import AppIconSet, parse_app_icon_set, parse_deployment_target

__all__ = [
    "Activity",
    "AndroidManifest",
    "AppIconSet",
    "GradleConfig",
    "InfoPlist",
    "LauncherIcon",
    "Match",
    "Pubspec",
    "SourceFile",
    "SourceScanner",
    "discover_source_files",
    "parse_android_manifest",
    "parse_app_icon_set",
    "parse_deployment_target",
    "parse_gradle",
    "parse_info_plist",
    "parse_pubspec",
    "scan_launcher_icons",
]
