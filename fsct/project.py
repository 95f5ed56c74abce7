"""Project snapshot construction for Flutter repositories."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Iterable, List, Optional, Tuple

from .logging import get_logger
from .parsers import (
    AndroidManifest,
    AppIconSet,
    GradleConfig,
    InfoPlist,
    LauncherIcon,
    Pubspec,
    SourceFile,
    SourceScanner,
    discover_source_files,
    parse_android_manifest,
    parse_app_icon_set,
    parse_deployment_target,
    parse_gradle,
    parse_info_plist,
    parse_pubspec,
    scan_launcher_icons,
)
from .parsers._io import read_text
from .parsers.dart import LOGIN_PATTERNS

_LOGGER = get_logger("project")

MANIFEST_PATH = "android/app/src/main/AndroidManifest.xml"
GRADLE_PATHS = ("android/app/build.gradle", "android/app/build.gradle.kts")
RES_PATH = "android/app/src/main/res"
INFO_PLIST_PATH = "ios/Runner/Info.plist"
PBXPROJ_PATH = "ios/Runner.xcodeproj/project.pbxproj"
APP_ICON_SET_PATH = "ios/Runner/Assets.xcassets/AppIcon.appiconset"
PUBSPEC_PATH = "pubspec.yaml"
ANALYSIS_OPTIONS_NAMES = ("analysis_options.yaml", "analysis_options.yml")
README_NAMES = ("README.md", "README", "README.rst", "README.txt")

NETWORK_DEPENDENCIES = (
    "http",
    "dio",
    "firebase",
    "graphql",
    "web_socket",
    "socket_io",
    "grpc",
    "supabase",
    "chopper",
    "retrofit",
)
CAMERA_DEPENDENCIES = ("camera", "image_picker", "mobile_scanner", "qr_code_scanner")
LOCATION_DEPENDENCIES = ("location", "geolocator", "geocoding", "google_maps")


@dataclass(frozen=True)
class Project:
    """Immutable view of a Flutter project handed to every check.

    Parsed records are ``None`` when the artifact does not exist, so checks can
    tell "absent" apart from "present but empty".
    """

    root: Path
    android_path: Path
    ios_path: Path
    android_manifest: Optional[AndroidManifest] = None
    gradle: Optional[GradleConfig] = None
    gradle_file: str = GRADLE_PATHS[0]
    info_plist: Optional[InfoPlist] = None
    pubspec: Optional[Pubspec] = None
    ios_deployment_target: str = ""
    launcher_icons: Tuple[LauncherIcon, ...] = ()
    app_icon_set: Optional[AppIconSet] = None
    source_files: Tuple[SourceFile, ...] = ()
    root_files: FrozenSet[str] = frozenset()
    analysis_options: Optional[str] = None
    readme: Optional[str] = None
    has_android: bool = False
    has_ios: bool = False
    has_network_deps: bool = False
    has_camera_deps: bool = False
    has_location_deps: bool = False
    has_image_picker: bool = False
    has_url_launcher: bool = False
    has_login_patterns: bool = False
    _scanner: Optional[SourceScanner] = field(default=None, repr=False, compare=False)

    @property
    def exists(self) -> bool:
        return self.root.is_dir()

    @property
    def scanner(self) -> SourceScanner:
        if self._scanner is not None:
            return self._scanner
        return SourceScanner(self.root, self.source_files)

    @property
    def dependency_names(self) -> List[str]:
        return list(self.pubspec.dependencies) if self.pubspec else []

    @property
    def dev_dependency_names(self) -> List[str]:
        return list(self.pubspec.dev_dependencies) if self.pubspec else []

    def has_dependency_containing(self, *fragments: str) -> bool:
        """Return True when any direct dependency name contains one of ``fragments``."""
        return _any_contains(self.dependency_names, fragments)

    @property
    def test_files(self) -> List[SourceFile]:
        return [source for source in self.source_files if _is_test_file(source.relative)]

    @property
    def app_files(self) -> List[SourceFile]:
        return [source for source in self.source_files if not _is_test_file(source.relative)]

    def has_root_file(self, *names: str) -> bool:
        return any(name in self.root_files for name in names)


def build_project(path: Path, *, android: bool = True, ios: bool = True) -> Project:
    """Parse every known artifact under ``path`` into a :class:`Project`.

    A nonexistent ``path`` yields a snapshot with no records and no sources.
    """
    root = path.expanduser()
    android_path = root / "android"
    ios_path = root / "ios"
    if not root.is_dir():
        _LOGGER.warning("Project path %s is not a directory", root)
        return Project(root=root, android_path=android_path, ios_path=ios_path)

    has_android = android and android_path.is_dir()
    has_ios = ios and ios_path.is_dir()

    manifest = gradle = None
    gradle_file = GRADLE_PATHS[0]
    launcher_icons: Tuple[LauncherIcon, ...] = ()
    if has_android:
        manifest = _parse_if_present(root / MANIFEST_PATH, parse_android_manifest)
        for candidate in GRADLE_PATHS:
            if (root / candidate).is_file():
                gradle = parse_gradle(root / candidate)
                gradle_file = candidate
                break
        launcher_icons = tuple(scan_launcher_icons(root / RES_PATH))

    info_plist = None
    deployment_target = ""
    app_icon_set = None
    if has_ios:
        info_plist = _parse_if_present(root / INFO_PLIST_PATH, parse_info_plist)
        deployment_target = parse_deployment_target(root / PBXPROJ_PATH)
        app_icon_set = parse_app_icon_set(root / APP_ICON_SET_PATH)

    pubspec = _parse_if_present(root / PUBSPEC_PATH, parse_pubspec)
    source_files = tuple(discover_source_files(root))
    scanner = SourceScanner(root, source_files)
    root_files = frozenset(entry.name for entry in root.iterdir() if entry.is_file())

    dependencies = list(pubspec.dependencies) if pubspec else []
    project = Project(
        root=root,
        android_path=android_path,
        ios_path=ios_path,
        android_manifest=manifest,
        gradle=gradle,
        gradle_file=gradle_file,
        info_plist=info_plist,
        pubspec=pubspec,
        ios_deployment_target=deployment_target,
        launcher_icons=launcher_icons,
        app_icon_set=app_icon_set,
        source_files=source_files,
        root_files=root_files,
        analysis_options=_read_first(root, ANALYSIS_OPTIONS_NAMES),
        readme=_read_first(root, README_NAMES),
        has_android=has_android,
        has_ios=has_ios,
        has_network_deps=_any_contains(dependencies, NETWORK_DEPENDENCIES),
        has_camera_deps=_any_contains(dependencies, CAMERA_DEPENDENCIES),
        has_location_deps=_any_contains(dependencies, LOCATION_DEPENDENCIES),
        has_image_picker=_any_contains(dependencies, ("image_picker",)),
        has_url_launcher=_any_contains(dependencies, ("url_launcher",)),
        has_login_patterns=scanner.any_match(LOGIN_PATTERNS),
        _scanner=scanner,
    )
    _LOGGER.debug(
        "Built snapshot for %s: %d source files, android=%s ios=%s pubspec=%s",
        root,
        len(source_files),
        has_android,
        has_ios,
        pubspec is not None,
    )
    return project


def _parse_if_present(path: Path, parser):
    if not path.is_file():
        _LOGGER.debug("Artifact not found: %s", path)
        return None
    return parser(path)


def _read_first(root: Path, names: Iterable[str]) -> Optional[str]:
    for name in names:
        candidate = root / name
        if candidate.is_file():
            return read_text(candidate, _LOGGER)
    return None


def _any_contains(names: Iterable[str], fragments: Iterable[str]) -> bool:
    fragments = tuple(fragments)
    for name in names:
        lowered = name.lower()
        if any(fragment in lowered for fragment in fragments):
            return True
    return False


def _is_test_file(relative: str) -> bool:
    return relative.startswith(("test/", "integration_test/")) or relative.endswith("_test.dart")


__all__ = [
    "ANALYSIS_OPTIONS_NAMES",
    "APP_ICON_SET_PATH",
    "CAMERA_DEPENDENCIES",
    "GRADLE_PATHS",
    "INFO_PLIST_PATH",
    "LOCATION_DEPENDENCIES",
    "MANIFEST_PATH",
    "NETWORK_DEPENDENCIES",
    "PBXPROJ_PATH",
    "PUBSPEC_PATH",
    "Project",
    "README_NAMES",
    "RES_PATH",
    "build_project",
]
