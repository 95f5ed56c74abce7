"""Android manifest, Gradle and resource checks (AND-*)."""

from __future__ import annotations

from typing import List, Optional

from ..models import SEVERITY_HIGH, SEVERITY_WARNING, Finding
from ..project import MANIFEST_PATH, RES_PATH, Project
from .base import Check

PLAY_STORE_TARGET_SDK = 35
RECOMMENDED_MIN_SDK = 21

# Byte sizes of the launcher icons generated by ``flutter create``.
DEFAULT_FLUTTER_ICON_SIZES = {
    "mipmap-mdpi": 442,
    "mipmap-hdpi": 544,
    "mipmap-xhdpi": 721,
    "mipmap-xxhdpi": 1031,
    "mipmap-xxxhdpi": 1443,
}

DANGEROUS_PERMISSION_FEATURES = (
    ("CAMERA", "android.hardware.camera"),
    ("ACCESS_FINE_LOCATION", "android.hardware.location.gps"),
    ("ACCESS_COARSE_LOCATION", "android.hardware.location"),
    ("RECORD_AUDIO", "android.hardware.microphone"),
)


def _as_int(value: str) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class TargetSdkCheck(Check):
    id = "AND-001"
    name = "Target SDK Version Check"

    def run(self, project: Project) -> List[Finding]:
        if project.gradle is None:
            return []
        target = _as_int(project.gradle.target_sdk_version)
        if target is None or target >= PLAY_STORE_TARGET_SDK:
            return []
        return [
            self.finding(
                SEVERITY_HIGH,
                f"Target SDK version is {target}. Google Play Store requires "
                f"targetSdkVersion {PLAY_STORE_TARGET_SDK}+.",
                file=project.gradle_file,
                suggestion=f"Update targetSdkVersion to {PLAY_STORE_TARGET_SDK} or higher",
            )
        ]


class MinSdkCheck(Check):
    id = "AND-002"
    name = "Minimum SDK Version Check"

    def run(self, project: Project) -> List[Finding]:
        if project.gradle is None:
            return []
        minimum = _as_int(project.gradle.min_sdk_version)
        if minimum is None or minimum >= RECOMMENDED_MIN_SDK:
            return []
        return [
            self.finding(
                SEVERITY_WARNING,
                f"Minimum SDK version is {minimum}. Consider updating to API "
                f"{RECOMMENDED_MIN_SDK}+ for better security and performance.",
                file=project.gradle_file,
                suggestion=f"Update minSdkVersion to {RECOMMENDED_MIN_SDK} or higher",
            )
        ]


class InternetPermissionCheck(Check):
    id = "AND-003"
    name = "Internet Permission Check"

    def run(self, project: Project) -> List[Finding]:
        if not project.has_network_deps or not project.has_android:
            return []
        manifest = project.android_manifest
        if manifest is not None and manifest.has_permission("INTERNET"):
            return []
        return [
            self.finding(
                SEVERITY_WARNING,
                "App uses network dependencies but does not have INTERNET permission "
                "declared in AndroidManifest.xml",
                file=MANIFEST_PATH,
                suggestion='Add <uses-permission android:name="android.permission.INTERNET" /> '
                "to AndroidManifest.xml",
            )
        ]


class DangerousPermissionsCheck(Check):
    id = "AND-004"
    name = "Dangerous Permissions Check"

    def run(self, project: Project) -> List[Finding]:
        manifest = project.android_manifest
        if manifest is None:
            return []
        findings = []
        for permission, feature in DANGEROUS_PERMISSION_FEATURES:
            if manifest.has_permission(permission) and not manifest.has_feature(feature):
                findings.append(
                    self.finding(
                        SEVERITY_WARNING,
                        f"App uses {permission} permission without corresponding "
                        "uses-feature declaration",
                        file=MANIFEST_PATH,
                        suggestion=f'Add <uses-feature android:name="{feature}" '
                        'android:required="false" /> to AndroidManifest.xml',
                    )
                )
        return findings


class DebuggableCheck(Check):
    id = "AND-005"
    name = "Debuggable Check"

    def run(self, project: Project) -> List[Finding]:
        manifest = project.android_manifest
        if manifest is None or not manifest.debuggable:
            return []
        return [
            self.finding(
                SEVERITY_HIGH,
                "android:debuggable is set to true. This should be false for release builds.",
                file=MANIFEST_PATH,
                suggestion='Set android:debuggable="false" or remove the attribute',
            )
        ]


class ExportedAttributeCheck(Check):
    id = "AND-006"
    name = "Exported Attribute Check"

    def run(self, project: Project) -> List[Finding]:
        manifest = project.android_manifest
        if manifest is None:
            return []
        return [
            self.finding(
                SEVERITY_HIGH,
                f"Activity {activity.name} has intent-filter but android:exported "
                "is not explicitly set",
                file=MANIFEST_PATH,
                suggestion='Set android:exported="true" or android:exported="false" for the activity',
            )
            for activity in manifest.activities
            if activity.has_intent_filter and activity.exported is None
        ]


class MissingAppIconCheck(Check):
    id = "AND-007"
    name = "Missing App Icon Check"

    def run(self, project: Project) -> List[Finding]:
        if not project.has_android:
            return []
        if any(icon.name.startswith("ic_launcher") for icon in project.launcher_icons):
            return []
        return [
            self.finding(
                SEVERITY_HIGH,
                "No ic_launcher icon found in res/mipmap-* directories",
                file=f"{RES_PATH}/",
                suggestion="Add ic_launcher.png or ic_launcher.webp to all mipmap directories",
            )
        ]


class PlaceholderIconCheck(Check):
    id = "AND-008"
    name = "Placeholder Icon Check"

    def run(self, project: Project) -> List[Finding]:
        for icon in project.launcher_icons:
            if icon.is_png and DEFAULT_FLUTTER_ICON_SIZES.get(icon.density) == icon.size:
                return [
                    self.finding(
                        SEVERITY_WARNING,
                        "Default Flutter launcher icon detected",
                        file=f"{RES_PATH}/{icon.relative}",
                        suggestion="Replace with your app's custom launcher icon",
                    )
                ]
        return []


class ApplicationIdCheck(Check):
    id = "AND-009"
    name = "Application ID Check"

    def run(self, project: Project) -> List[Finding]:
        if project.gradle is None or not project.gradle.application_id.startswith("com.example."):
            return []
        return [
            self.finding(
                SEVERITY_HIGH,
                "Application ID starts with com.example. Google Play Store requires a "
                "unique, valid package name.",
                file=project.gradle_file,
                suggestion="Change applicationId to a unique package name "
                "(e.g., com.yourcompany.yourapp)",
            )
        ]


class VersionCodeCheck(Check):
    id = "AND-010"
    name = "Version Code Check"

    def run(self, project: Project) -> List[Finding]:
        if project.gradle is None or _as_int(project.gradle.version_code) != 1:
            return []
        return [
            self.finding(
                SEVERITY_WARNING,
                "versionCode is 1. Consider incrementing the version code for updates.",
                file=project.gradle_file,
                suggestion="Increment versionCode for subsequent releases",
            )
        ]


class PackageVisibilityCheck(Check):
    id = "AND-011"
    name = "Package Visibility Check"

    def run(self, project: Project) -> List[Finding]:
        if not project.has_url_launcher or not project.has_android:
            return []
        manifest = project.android_manifest
        if manifest is not None and manifest.queries_packages:
            return []
        return [
            self.finding(
                SEVERITY_WARNING,
                "App uses url_launcher but does not have <queries> declaration in "
                "AndroidManifest.xml for package visibility",
                file=MANIFEST_PATH,
                suggestion="Add <queries> element with the packages your app needs to query",
            )
        ]


class AllowBackupCheck(Check):
    id = "AND-012"
    name = "Allow Backup Check"

    def run(self, project: Project) -> List[Finding]:
        manifest = project.android_manifest
        if manifest is None or not manifest.allow_backup:
            return []
        return [
            self.finding(
                SEVERITY_WARNING,
                "android:allowBackup is set to true. Consider disabling if app handles "
                "sensitive data.",
                file=MANIFEST_PATH,
                suggestion='Set android:allowBackup="false" or implement encryption for sensitive data',
            )
        ]


ANDROID_CHECKS = (
    TargetSdkCheck,
    MinSdkCheck,
    InternetPermissionCheck,
    DangerousPermissionsCheck,
    DebuggableCheck,
    ExportedAttributeCheck,
    MissingAppIconCheck,
    PlaceholderIconCheck,
    ApplicationIdCheck,
    VersionCodeCheck,
    PackageVisibilityCheck,
    AllowBackupCheck,
)

__all__ = [
    "ANDROID_CHECKS",
    "AllowBackupCheck",
    "ApplicationIdCheck",
    "DangerousPermissionsCheck",
    "DebuggableCheck",
    "ExportedAttributeCheck",
    "InternetPermissionCheck",
    "MinSdkCheck",
    "MissingAppIconCheck",
    "PackageVisibilityCheck",
    "PlaceholderIconCheck",
    "TargetSdkCheck",
    "VersionCodeCheck",
]
