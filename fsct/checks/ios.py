"""iOS Info.plist, icon and deployment checks (IOS-*)."""

from __future__ import annotations

import re
from typing import List, Tuple

from ..models import SEVERITY_HIGH, SEVERITY_WARNING, Finding
from ..parsers import plist
from ..project import APP_ICON_SET_PATH, INFO_PLIST_PATH, PBXPROJ_PATH, Project
from .base import Check

MINIMUM_DEPLOYMENT_TARGET = (12, 0)
_VERSION_PREFIX = re.compile(r"^(\d+)\.(\d+)")


class UsageDescriptionCheck(Check):
    """Flags a sensitive dependency whose Info.plist usage description is missing."""

    usage_key = ""
    label = ""
    dependency_fragments: Tuple[str, ...] = ()
    suggestion = ""

    def uses_capability(self, project: Project) -> bool:
        return project.has_dependency_containing(*self.dependency_fragments)

    def run(self, project: Project) -> List[Finding]:
        if not self.uses_capability(project):
            return []
        if project.info_plist is not None and project.info_plist.has_usage_description(self.usage_key):
            return []
        return [
            self.finding(
                SEVERITY_HIGH,
                f"App uses {self.label} but does not have {self.usage_key} in Info.plist",
                file=INFO_PLIST_PATH,
                suggestion=self.suggestion
                or f"Add {self.usage_key} with a clear explanation",
            )
        ]


class CameraUsageDescriptionCheck(UsageDescriptionCheck):
    id = "IOS-001"
    name = "Camera Usage Description Check"
    usage_key = plist.CAMERA
    label = "camera dependencies"
    suggestion = (
        "Add NSCameraUsageDescription with a clear explanation of why camera access is needed"
    )

    def uses_capability(self, project: Project) -> bool:
        return project.has_camera_deps


class PhotoLibraryUsageDescriptionCheck(UsageDescriptionCheck):
    id = "IOS-002"
    name = "Photo Library Usage Description Check"
    usage_key = plist.PHOTO_LIBRARY
    label = "image_picker"

    def uses_capability(self, project: Project) -> bool:
        return project.has_image_picker


class LocationUsageDescriptionCheck(UsageDescriptionCheck):
    id = "IOS-003"
    name = "Location Usage Description Check"
    usage_key = plist.LOCATION_WHEN_IN_USE
    label = "location dependencies"

    def uses_capability(self, project: Project) -> bool:
        return project.has_location_deps


class MicrophoneUsageDescriptionCheck(UsageDescriptionCheck):
    id = "IOS-004"
    name = "Microphone Usage Description Check"
    usage_key = plist.MICROPHONE
    label = "microphone dependencies"
    dependency_fragments = ("mic", "audio", "record", "sound", "voice")


class ContactsUsageDescriptionCheck(UsageDescriptionCheck):
    id = "IOS-005"
    name = "Contacts Usage Description Check"
    usage_key = plist.CONTACTS
    label = "contacts dependencies"
    dependency_fragments = ("contact",)


class CalendarsUsageDescriptionCheck(UsageDescriptionCheck):
    id = "IOS-006"
    name = "Calendars Usage Description Check"
    usage_key = plist.CALENDARS
    label = "calendar dependencies"
    dependency_fragments = ("calendar", "event")


class EmptyUsageDescriptionCheck(Check):
    id = "IOS-007"
    name = "Empty Usage Description Check"

    def run(self, project: Project) -> List[Finding]:
        if project.info_plist is None:
            return []
        return [
            self.finding(
                SEVERITY_HIGH,
                f"{key} is present in Info.plist but its description is empty",
                file=INFO_PLIST_PATH,
                suggestion=f"Explain in {key} why the app needs this access; "
                "App Review rejects empty purpose strings",
            )
            for key, description in project.info_plist.usage_descriptions.items()
            if not description
        ]


class MissingAppIconCheck(Check):
    id = "IOS-008"
    name = "Missing App Icon Check"

    def run(self, project: Project) -> List[Finding]:
        if not project.has_ios or (project.app_icon_set and project.app_icon_set.exists):
            return []
        return [
            self.finding(
                SEVERITY_HIGH,
                "AppIcon.appiconset folder not found in Assets.xcassets",
                file=APP_ICON_SET_PATH,
                suggestion="Add AppIcon.appiconset with required icon images",
            )
        ]


class Missing1024IconCheck(Check):
    id = "IOS-009"
    name = "Missing 1024x1024 Icon Check"

    def run(self, project: Project) -> List[Finding]:
        icon_set = project.app_icon_set
        if icon_set is None or not icon_set.exists or not icon_set.images:
            return []
        if icon_set.has_image("1024x1024", "ios-marketing"):
            return []
        return [
            self.finding(
                SEVERITY_HIGH,
                "No 1024x1024 (ios-marketing) icon found in AppIcon.appiconset Contents.json",
                file=f"{APP_ICON_SET_PATH}/Contents.json",
                suggestion="Add a 1024x1024 icon for iOS marketing size",
            )
        ]


class FullScreenConflictCheck(Check):
    id = "IOS-010"
    name = "Full Screen Conflict Check"

    def run(self, project: Project) -> List[Finding]:
        if project.info_plist is None or not project.info_plist.requires_full_screen:
            return []
        return [
            self.finding(
                SEVERITY_WARNING,
                "UIRequiresFullScreen is set to true. If your app supports iPad, this may "
                "cause App Store rejection.",
                file=INFO_PLIST_PATH,
                suggestion="Either set UIRequiresFullScreen to false or ensure iPad is not "
                "in the target device list",
            )
        ]


class EncryptionDeclarationCheck(Check):
    id = "IOS-011"
    name = "Encryption Declaration Check"

    def run(self, project: Project) -> List[Finding]:
        if project.info_plist is None or project.info_plist.encryption_declared:
            return []
        return [
            self.finding(
                SEVERITY_WARNING,
                "ITSAppUsesNonExemptEncryption is not set in Info.plist. Apple requires "
                "this declaration.",
                file=INFO_PLIST_PATH,
                suggestion="Add ITSAppUsesNonExemptEncryption and set it to false if not "
                "using encryption, or true and provide export compliance",
            )
        ]


class DeploymentTargetCheck(Check):
    id = "IOS-012"
    name = "Deployment Target Check"

    def run(self, project: Project) -> List[Finding]:
        match = _VERSION_PREFIX.match(project.ios_deployment_target)
        if match is None:
            return []
        if (int(match.group(1)), int(match.group(2))) >= MINIMUM_DEPLOYMENT_TARGET:
            return []
        return [
            self.finding(
                SEVERITY_WARNING,
                "IPHONEOS_DEPLOYMENT_TARGET is less than 12.0. Consider updating to "
                "support modern iOS versions.",
                file=PBXPROJ_PATH,
                suggestion="Update IPHONEOS_DEPLOYMENT_TARGET to 12.0 or higher",
            )
        ]


IOS_CHECKS = (
    CameraUsageDescriptionCheck,
    PhotoLibraryUsageDescriptionCheck,
    LocationUsageDescriptionCheck,
    MicrophoneUsageDescriptionCheck,
    ContactsUsageDescriptionCheck,
    CalendarsUsageDescriptionCheck,
    EmptyUsageDescriptionCheck,
    MissingAppIconCheck,
    Missing1024IconCheck,
    FullScreenConflictCheck,
    EncryptionDeclarationCheck,
    DeploymentTargetCheck,
)

__all__ = [
    "CalendarsUsageDescriptionCheck",
    "CameraUsageDescriptionCheck",
    "ContactsUsageDescriptionCheck",
    "DeploymentTargetCheck",
    "EmptyUsageDescriptionCheck",
    "EncryptionDeclarationCheck",
    "FullScreenConflictCheck",
    "IOS_CHECKS",
    "LocationUsageDescriptionCheck",
    "MicrophoneUsageDescriptionCheck",
    "Missing1024IconCheck",
    "MissingAppIconCheck",
    "PhotoLibraryUsageDescriptionCheck",
    "UsageDescriptionCheck",
]
