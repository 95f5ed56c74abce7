"""Privacy-safe project summary sent to remote models.

Nothing in :class:`ComplianceMetadata` may carry source code, file contents,
paths, credentials or dependency versions.
"""

from __future__ import annotations

import json
import re
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Sequence

from ..models import SEVERITY_HIGH, SEVERITY_INFO, SEVERITY_WARNING, Finding, category_for_id
from ..project import Project

MAX_DESCRIPTION_LENGTH = 200
SENSITIVE_DESCRIPTION = "[Description contains sensitive keywords]"
_SENSITIVE_WORDS = ("password", "secret")
_LEADING_INT = re.compile(r"^\s*(\d+)")

_FEATURE_DEPENDENCIES = {
    "has_microphone": ("microphone", "record"),
    "has_contacts": ("contacts_service", "contacts"),
    "has_calendar": ("device_calendar",),
    "has_bluetooth": ("flutter_blue", "bluetooth"),
    "has_notifications": ("firebase_messaging", "flutter_local_notifications"),
    "has_in_app_purchase": ("in_app_purchase", "purchases_flutter"),
    "has_social_login": ("google_sign_in", "sign_in_with_apple"),
    "has_email_login": ("firebase_auth",),
}


@dataclass
class FindingMeta:
    id: str
    category: str
    severity: str
    title: str


@dataclass
class AppFeatures:
    has_login: bool = False
    has_camera: bool = False
    has_location: bool = False
    has_microphone: bool = False
    has_photo_library: bool = False
    has_contacts: bool = False
    has_calendar: bool = False
    has_bluetooth: bool = False
    has_notifications: bool = False
    has_in_app_purchase: bool = False
    has_social_login: bool = False
    has_email_login: bool = False
    has_data_deletion: bool = True
    has_privacy_policy: bool = True
    has_terms_of_service: bool = True


@dataclass
class AppConfig:
    uses_material_design: bool = False
    has_linter: bool = False
    has_icon_config: bool = False
    has_splash_config: bool = False
    has_deprecated_deps: bool = False
    has_debug_deps: bool = False


@dataclass
class SecurityFlags:
    is_debuggable: bool = False
    allows_backup: bool = False
    has_insecure_http: bool = False
    has_hardcoded_keys: bool = False
    missing_encryption_decl: bool = False


@dataclass
class ComplianceMetadata:
    app_name: str = ""
    version: str = ""
    description: str = ""
    compliance_score: int = 100
    total_checks: int = 0
    passed_checks: int = 0
    high_count: int = 0
    warning_count: int = 0
    info_count: int = 0
    android_target_sdk: int = 0
    android_min_sdk: int = 0
    ios_deployment_target: str = ""
    findings: List[FindingMeta] = field(default_factory=list)
    android_permissions: List[str] = field(default_factory=list)
    ios_permissions: List[str] = field(default_factory=list)
    dependencies: List[str] = field(default_factory=list)
    dev_dependencies: List[str] = field(default_factory=list)
    features: AppFeatures = field(default_factory=AppFeatures)
    config: AppConfig = field(default_factory=AppConfig)
    security: SecurityFlags = field(default_factory=SecurityFlags)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self, *, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def size(self) -> int:
        return len(self.to_json(indent=None))


def extract_metadata(
    project: Project, findings: Sequence[Finding], *, total_checks: int = 0
) -> ComplianceMetadata:
    """Reduce ``project`` and its static findings to the shareable summary."""
    meta = ComplianceMetadata()
    pubspec = project.pubspec
    if pubspec is not None:
        meta.app_name = pubspec.name
        meta.version = pubspec.version
        meta.description = sanitize_description(pubspec.description)
    if not meta.app_name:
        meta.app_name = project.root.name
    meta.version = meta.version or "1.0.0"

    ids = set()
    for finding in findings:
        ids.add(finding.id)
        meta.findings.append(
            FindingMeta(
                id=finding.id,
                category=category_for_id(finding.id),
                severity=finding.severity,
                title=finding.title,
            )
        )
        if finding.severity == SEVERITY_HIGH:
            meta.high_count += 1
        elif finding.severity == SEVERITY_WARNING:
            meta.warning_count += 1
        elif finding.severity == SEVERITY_INFO:
            meta.info_count += 1

    meta.total_checks = max(total_checks, len(findings))
    meta.passed_checks = meta.total_checks - len(findings)
    score = 100 - meta.high_count * 10 - meta.warning_count * 3 - meta.info_count
    meta.compliance_score = max(score, 0)

    if project.gradle is not None:
        meta.android_target_sdk = _leading_int(project.gradle.target_sdk_version)
        meta.android_min_sdk = _leading_int(project.gradle.min_sdk_version)
    meta.ios_deployment_target = project.ios_deployment_target

    if project.android_manifest is not None:
        meta.android_permissions = [
            permission.rsplit(".", 1)[-1] for permission in project.android_manifest.permissions
        ]
    plist = project.info_plist
    if plist is not None:
        presence = (
            ("Camera", plist.has_camera_description),
            ("Location", plist.has_location_description),
            ("PhotoLibrary", plist.has_photo_library_description),
            ("Microphone", plist.has_microphone_description),
            ("Contacts", plist.has_contacts_description),
            ("Calendar", plist.has_calendars_description),
        )
        meta.ios_permissions = [name for name, present in presence if present]

    meta.dependencies = sorted(project.dependency_names)
    meta.dev_dependencies = sorted(project.dev_dependency_names)

    features = meta.features
    features.has_login = project.has_login_patterns
    features.has_camera = project.has_camera_deps
    features.has_location = project.has_location_deps
    features.has_photo_library = project.has_image_picker
    lowered = {name.lower() for name in project.dependency_names}
    for flag, names in _FEATURE_DEPENDENCIES.items():
        setattr(features, flag, any(name in lowered for name in names))
    features.has_data_deletion = "POL-003" not in ids
    features.has_privacy_policy = "POL-001" not in ids
    features.has_terms_of_service = "POL-002" not in ids

    if pubspec is not None:
        meta.config = AppConfig(
            uses_material_design=pubspec.uses_material_design,
            has_linter=pubspec.has_linter,
            has_icon_config=pubspec.has_icon_config,
            has_splash_config=pubspec.has_splash_config,
            has_deprecated_deps=pubspec.has_deprecated_package,
            has_debug_deps=pubspec.has_debug_deps_in_main,
        )

    security = meta.security
    if project.android_manifest is not None:
        security.is_debuggable = project.android_manifest.debuggable
        security.allows_backup = project.android_manifest.allow_backup
    security.has_insecure_http = "SEC-003" in ids
    security.has_hardcoded_keys = "SEC-001" in ids
    security.missing_encryption_decl = "IOS-011" in ids
    return meta


def sanitize_description(description: str) -> str:
    if len(description) > MAX_DESCRIPTION_LENGTH:
        description = description[:MAX_DESCRIPTION_LENGTH] + "..."
    lowered = description.lower()
    if any(word in lowered for word in _SENSITIVE_WORDS):
        return SENSITIVE_DESCRIPTION
    return description


def _leading_int(value: str) -> int:
    match = _LEADING_INT.match(value or "")
    return int(match.group(1)) if match else 0


__all__ = [
    "AppConfig",
    "AppFeatures",
    "ComplianceMetadata",
    "FindingMeta",
    "SecurityFlags",
    "extract_metadata",
    "sanitize_description",
]
