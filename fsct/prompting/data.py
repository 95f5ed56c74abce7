"""Context gathered for the copy-paste AI compliance prompt."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from ..config import DEFAULT_PASSWORD_ENV, ReviewerConfig
from ..models import SEVERITY_HIGH, SEVERITY_INFO, SEVERITY_WARNING, Finding, category_for_id
from ..project import GRADLE_PATHS, INFO_PLIST_PATH, MANIFEST_PATH, PBXPROJ_PATH, Project

REQUIRED_TARGET_SDK = 35
DEFAULT_APP_NAME = "Flutter App"
DEFAULT_DESCRIPTION = "Flutter mobile application"

PERMISSION_RISK: Dict[str, str] = {
    "android.permission.CAMERA": "high",
    "android.permission.ACCESS_FINE_LOCATION": "high",
    "android.permission.ACCESS_COARSE_LOCATION": "medium",
    "android.permission.RECORD_AUDIO": "high",
    "android.permission.READ_CONTACTS": "high",
    "android.permission.WRITE_CONTACTS": "high",
    "android.permission.READ_CALENDAR": "medium",
    "android.permission.WRITE_CALENDAR": "medium",
    "android.permission.READ_EXTERNAL_STORAGE": "medium",
    "android.permission.WRITE_EXTERNAL_STORAGE": "medium",
    "android.permission.INTERNET": "low",
    "android.permission.ACCESS_NETWORK_STATE": "low",
    "android.permission.RECEIVE_BOOT_COMPLETED": "low",
    "android.permission.VIBRATE": "low",
}
HIGH_RISK_PACKAGES: Dict[str, str] = {
    "http": "Uses insecure HTTP by default",
    "dio": "Check for certificate validation",
    "permission_handler": "Ensure iOS descriptions are set",
}
WEAK_PASSWORD_WORDS = ("password", "123456", "test", "qwerty", "admin", "flutter")


@dataclass
class FindingSummary:
    id: str
    severity: str
    category: str
    title: str
    message: str = ""
    file: str = ""
    suggestion: str = ""


@dataclass
class AndroidSummary:
    package_name: str = ""
    target_sdk_version: int = 0
    min_sdk_version: int = 0
    version_code: int = 0
    version_name: str = ""
    is_debuggable: bool = False
    allow_backup: bool = False
    has_internet_permission: bool = False


@dataclass
class IOSSummary:
    bundle_identifier: str = ""
    bundle_version: str = ""
    bundle_short_version: str = ""
    deployment_target: str = ""
    requires_full_screen: bool = False
    encryption_declared: bool = False
    has_camera_description: bool = False
    has_location_description: bool = False
    has_photo_library_description: bool = False
    has_microphone_description: bool = False


@dataclass
class FlutterSummary:
    uses_material_design: bool = False
    has_linter: bool = False
    has_icon_config: bool = False
    has_splash_config: bool = False
    has_deprecated_package: bool = False
    has_debug_deps: bool = False


@dataclass
class PermissionInfo:
    name: str
    platform: str
    present: bool = True
    has_description: bool = False
    description: str = ""
    risk_level: str = "low"


@dataclass
class DependencyInfo:
    name: str
    version: str = ""
    is_dev: bool = False
    risk_level: str = ""
    latest_version: str = ""


@dataclass
class SecurityFlag:
    type: str
    present: bool
    description: str
    severity: str


@dataclass
class PolicyFlag:
    type: str
    present: bool
    description: str


@dataclass
class ReviewerAccountInfo:
    configured: bool = False
    email: str = ""
    password_env: str = DEFAULT_PASSWORD_ENV
    has_weak_password: bool = False
    can_verify: bool = False
    login_endpoint: str = ""


@dataclass
class BlockerInfo:
    id: str
    category: str
    title: str
    description: str
    platform: str
    fix_file: str = ""
    fix_snippet: str = ""


@dataclass
class PromptData:
    """Everything the prompt templates render, derived from one run."""

    app_name: str = ""
    version: str = ""
    description: str = ""
    flutter_version: str = ""
    repository: str = ""
    homepage: str = ""
    total_checks: int = 0
    passed_checks: int = 0
    findings_by_severity: Dict[str, List[FindingSummary]] = field(default_factory=dict)
    findings_by_category: Dict[str, List[FindingSummary]] = field(default_factory=dict)
    android: AndroidSummary = field(default_factory=AndroidSummary)
    ios: IOSSummary = field(default_factory=IOSSummary)
    flutter: FlutterSummary = field(default_factory=FlutterSummary)
    android_permissions: List[PermissionInfo] = field(default_factory=list)
    ios_permissions: List[PermissionInfo] = field(default_factory=list)
    dependencies: List[DependencyInfo] = field(default_factory=list)
    dev_dependencies: List[DependencyInfo] = field(default_factory=list)
    high_risk_dependencies: List[DependencyInfo] = field(default_factory=list)
    outdated_dependencies: List[DependencyInfo] = field(default_factory=list)
    security_flags: List[SecurityFlag] = field(default_factory=list)
    policy_flags: List[PolicyFlag] = field(default_factory=list)
    missing_policies: List[str] = field(default_factory=list)
    reviewer_account: Optional[ReviewerAccountInfo] = None
    blockers: List[BlockerInfo] = field(default_factory=list)

    def add_finding(self, finding: FindingSummary) -> None:
        self.findings_by_severity.setdefault(finding.severity, []).append(finding)
        self.findings_by_category.setdefault(finding.category, []).append(finding)

    def findings_with(self, severity: str) -> List[FindingSummary]:
        return self.findings_by_severity.get(severity, [])

    @property
    def high_count(self) -> int:
        return len(self.findings_with(SEVERITY_HIGH))

    @property
    def warning_count(self) -> int:
        return len(self.findings_with(SEVERITY_WARNING))

    @property
    def info_count(self) -> int:
        return len(self.findings_with(SEVERITY_INFO))

    def _ready_for(self, platform: str, category: str) -> bool:
        if any(blocker.platform in (platform, "both") for blocker in self.blockers):
            return False
        return not any(
            finding.category in (category, "Security") for finding in self.findings_with(SEVERITY_HIGH)
        )

    @property
    def ready_for_app_store(self) -> bool:
        return self._ready_for("ios", "iOS")

    @property
    def ready_for_play_store(self) -> bool:
        return self._ready_for("android", "Android")

    @property
    def compliance_score(self) -> int:
        """Passed share of 100, minus 10 per HIGH, 3 per WARNING and 1 per INFO."""
        if self.total_checks == 0:
            return 0
        score = (
            self.passed_checks * 100 // self.total_checks
            - self.high_count * 10
            - self.warning_count * 3
            - self.info_count
        )
        return min(max(score, 0), 100)

    @property
    def status(self) -> str:
        score = self.compliance_score
        if self.high_count > 0:
            return "❌ NEEDS CRITICAL ATTENTION"
        if score >= 90:
            return "✅ EXCELLENT"
        if score >= 75:
            return "⚠️ GOOD WITH MINOR ISSUES"
        if score >= 50:
            return "⚠️ NEEDS ATTENTION"
        return "❌ SIGNIFICANT WORK REQUIRED"


def build_prompt_data(
    findings: Sequence[Finding],
    *,
    total_checks: int,
    project: Optional[Project] = None,
    reviewer: Optional[ReviewerConfig] = None,
) -> PromptData:
    """Assemble prompt context; without ``project`` only the findings are described."""
    data = PromptData(total_checks=total_checks, passed_checks=max(total_checks - len(findings), 0))
    for finding in findings:
        data.add_finding(
            FindingSummary(
                id=finding.id,
                severity=finding.severity,
                category=category_for_id(finding.id),
                title=finding.title,
                message=finding.message,
                file=finding.file,
                suggestion=finding.suggestion,
            )
        )

    if project is None:
        data.app_name = DEFAULT_APP_NAME
        data.version = "1.0.0"
        data.description = DEFAULT_DESCRIPTION
        return data

    _apply_metadata(data, project)
    _apply_platform_config(data, project)
    _apply_permissions(data, project)
    _apply_dependencies(data, project)
    _apply_security_and_policy(data, project)
    data.reviewer_account = _reviewer_account(reviewer or ReviewerConfig())
    data.blockers = _blockers(data, project)
    return data


def _apply_metadata(data: PromptData, project: Project) -> None:
    pubspec = project.pubspec
    if pubspec is not None:
        data.app_name = pubspec.name
        data.version = pubspec.version
        data.description = pubspec.description
        data.repository = pubspec.repository
        data.homepage = pubspec.homepage
        data.flutter_version = pubspec.sdk_constraint
    data.app_name = data.app_name or project.root.name
    data.version = data.version or "1.0.0"


def _apply_platform_config(data: PromptData, project: Project) -> None:
    android = data.android
    if project.gradle is not None:
        android.package_name = project.gradle.application_id
        android.target_sdk_version = _to_int(project.gradle.target_sdk_version)
        android.min_sdk_version = _to_int(project.gradle.min_sdk_version)
        android.version_code = _to_int(project.gradle.version_code)
        android.version_name = project.gradle.version_name
    manifest = project.android_manifest
    if manifest is not None:
        android.package_name = android.package_name or manifest.package
        android.is_debuggable = manifest.debuggable
        android.allow_backup = manifest.allow_backup
        android.has_internet_permission = "android.permission.INTERNET" in manifest.permissions

    plist = project.info_plist
    data.ios.deployment_target = project.ios_deployment_target
    if plist is not None:
        data.ios.bundle_identifier = plist.bundle_identifier
        data.ios.bundle_version = plist.bundle_version
        data.ios.bundle_short_version = plist.bundle_short_version
        data.ios.encryption_declared = plist.encryption_declared
        data.ios.requires_full_screen = plist.requires_full_screen
        data.ios.has_camera_description = plist.has_camera_description
        data.ios.has_location_description = plist.has_location_description
        data.ios.has_photo_library_description = plist.has_photo_library_description
        data.ios.has_microphone_description = plist.has_microphone_description

    pubspec = project.pubspec
    if pubspec is not None:
        data.flutter = FlutterSummary(
            uses_material_design=pubspec.uses_material_design,
            has_linter=pubspec.has_linter,
            has_icon_config=pubspec.has_icon_config,
            has_splash_config=pubspec.has_splash_config,
            has_deprecated_package=pubspec.has_deprecated_package,
            has_debug_deps=pubspec.has_debug_deps_in_main,
        )


def _apply_permissions(data: PromptData, project: Project) -> None:
    if project.android_manifest is not None:
        for permission in project.android_manifest.permissions:
            data.android_permissions.append(
                PermissionInfo(
                    name=permission,
                    platform="android",
                    risk_level=PERMISSION_RISK.get(permission, "low"),
                )
            )

    plist = project.info_plist
    descriptions = plist.usage_descriptions if plist is not None else {}
    for key in (
        "NSCameraUsageDescription",
        "NSPhotoLibraryUsageDescription",
        "NSLocationWhenInUseUsageDescription",
        "NSLocationAlwaysAndWhenInUseUsageDescription",
        "NSMicrophoneUsageDescription",
        "NSContactsUsageDescription",
        "NSCalendarsUsageDescription",
    ):
        description = descriptions.get(key, "")
        data.ios_permissions.append(
            PermissionInfo(
                name=key,
                platform="ios",
                present=key in descriptions,
                has_description=bool(description),
                description=description,
            )
        )


def _apply_dependencies(data: PromptData, project: Project) -> None:
    pubspec = project.pubspec
    if pubspec is None:
        return
    for name in sorted(pubspec.dependencies):
        dependency = DependencyInfo(name=name, version=pubspec.dependencies[name])
        if name in HIGH_RISK_PACKAGES:
            dependency.risk_level = "high"
            data.high_risk_dependencies.append(dependency)
        data.dependencies.append(dependency)
    for name in sorted(pubspec.dev_dependencies):
        data.dev_dependencies.append(
            DependencyInfo(name=name, version=pubspec.dev_dependencies[name], is_dev=True)
        )


def _apply_security_and_policy(data: PromptData, project: Project) -> None:
    manifest = project.android_manifest
    exported = manifest is not None and any(activity.exported for activity in manifest.activities)
    data.security_flags = [
        SecurityFlag(
            type="Debug Mode",
            present=manifest is not None and manifest.debuggable,
            description="App is debuggable",
            severity=SEVERITY_HIGH,
        ),
        SecurityFlag(
            type="Insecure HTTP",
            present=project.has_network_deps,
            description="App uses network dependencies",
            severity=SEVERITY_WARNING,
        ),
        SecurityFlag(
            type="Exported Activities",
            present=exported,
            description="Activities are exported",
            severity=SEVERITY_HIGH,
        ),
    ]

    scanner = project.scanner
    privacy = bool(scanner.find_privacy_patterns())
    terms = bool(scanner.find_terms_patterns())
    deletion = bool(scanner.find_delete_account_patterns())
    logout = bool(scanner.find_logout_patterns())
    data.policy_flags = [
        PolicyFlag("Privacy Policy", privacy, "Privacy policy URL configured"),
        PolicyFlag("Terms of Service", terms, "Terms of service URL configured"),
        PolicyFlag("Account Deletion", deletion, "Account deletion functionality detected"),
        PolicyFlag("Logout Functionality", logout, "Logout functionality detected"),
    ]
    data.missing_policies = [flag.type for flag in data.policy_flags if not flag.present]


def _reviewer_account(config: ReviewerConfig) -> ReviewerAccountInfo:
    email = config.resolve_email()
    password = config.resolve_password()
    lowered = password.lower()
    return ReviewerAccountInfo(
        configured=bool(email and password),
        email=email,
        password_env=config.password_env or DEFAULT_PASSWORD_ENV,
        has_weak_password=bool(password) and any(word in lowered for word in WEAK_PASSWORD_WORDS),
        can_verify=config.verification_enabled,
        login_endpoint=config.verification.auth_endpoint if config.verification else "",
    )


def _blockers(data: PromptData, project: Project) -> List[BlockerInfo]:
    blockers: List[BlockerInfo] = []
    target = data.android.target_sdk_version
    if 0 < target < REQUIRED_TARGET_SDK:
        blockers.append(
            BlockerInfo(
                id="AND-001",
                category="Android SDK",
                title="Target SDK Version Too Low",
                description=f"Target SDK is {target}, Play Store requires {REQUIRED_TARGET_SDK}+",
                platform="android",
                fix_file=project.gradle_file or GRADLE_PATHS[0],
                fix_snippet=f"targetSdkVersion {REQUIRED_TARGET_SDK}",
            )
        )
    if data.android.is_debuggable:
        blockers.append(
            BlockerInfo(
                id="AND-005",
                category="Android Security",
                title="Debuggable Flag Enabled",
                description='App has android:debuggable="true" in manifest',
                platform="android",
                fix_file=MANIFEST_PATH,
                fix_snippet="Remove android:debuggable attribute",
            )
        )
    bundle_id = data.ios.bundle_identifier
    if project.info_plist is not None and (not bundle_id or bundle_id.startswith("com.example")):
        blockers.append(
            BlockerInfo(
                id="IOS-BUNDLE",
                category="iOS Bundle ID",
                title="Invalid Bundle Identifier",
                description="Bundle ID is missing or uses com.example prefix",
                platform="ios",
                fix_file=PBXPROJ_PATH,
                fix_snippet="Set unique PRODUCT_BUNDLE_IDENTIFIER",
            )
        )
    if project.has_camera_deps and not data.ios.has_camera_description:
        blockers.append(
            BlockerInfo(
                id="IOS-001",
                category="iOS Privacy",
                title="Missing Camera Usage Description",
                description="App uses camera but NSCameraUsageDescription is missing",
                platform="ios",
                fix_file=INFO_PLIST_PATH,
                fix_snippet=(
                    "<key>NSCameraUsageDescription</key>\n"
                    "<string>This app needs camera access to...</string>"
                ),
            )
        )
    if project.has_location_deps and not data.ios.has_location_description:
        blockers.append(
            BlockerInfo(
                id="IOS-003",
                category="iOS Privacy",
                title="Missing Location Usage Description",
                description="App uses location but NSLocationWhenInUseUsageDescription is missing",
                platform="ios",
                fix_file=INFO_PLIST_PATH,
                fix_snippet=(
                    "<key>NSLocationWhenInUseUsageDescription</key>\n"
                    "<string>This app needs location access to...</string>"
                ),
            )
        )
    return blockers


def _to_int(value: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


__all__ = [
    "BlockerInfo",
    "DependencyInfo",
    "FindingSummary",
    "PermissionInfo",
    "PolicyFlag",
    "PromptData",
    "ReviewerAccountInfo",
    "SecurityFlag",
    "build_prompt_data",
]
