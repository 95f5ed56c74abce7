"""Line scanner for the subset of pubspec.yaml the checks consume.

Top-level scalars, the ``dependencies``/``dev_dependencies`` maps, the
``environment`` map and a few ``flutter`` section keys are recognised.
Deeper nesting is folded into a compact ``key: value`` string so that, for
example, ``flutter: {sdk: flutter}`` is stored as ``"sdk: flutter"``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..logging import get_logger
from ._io import read_text

_LOGGER = get_logger("parsers.pubspec")

LINTER_PACKAGES = ("flutter_lints", "very_good_analysis", "pedantic", "dart_style")
DEPRECATED_PACKAGES = ("package_info", "android_alarm_manager", "device_info")
DEBUG_PACKAGES = ("flutter_driver", "integration_test", "mockito")

_SCALAR_FIELDS = ("name", "version", "description", "homepage", "repository", "publish_to")
_MAP_SECTIONS = ("dependencies", "dev_dependencies", "environment")
_ICON_SECTIONS = ("flutter_launcher_icons", "flutter_icons")
_SPLASH_SECTIONS = ("flutter_native_splash",)


@dataclass
class Pubspec:
    """Parsed view of ``pubspec.yaml``."""

    name: str = ""
    version: str = ""
    description: str = ""
    homepage: str = ""
    repository: str = ""
    publish_to: str = ""
    dependencies: Dict[str, str] = field(default_factory=dict)
    dev_dependencies: Dict[str, str] = field(default_factory=dict)
    environment: Dict[str, str] = field(default_factory=dict)
    has_flutter_section: bool = False
    uses_material_design: bool = False
    assets: List[str] = field(default_factory=list)
    top_level_sections: List[str] = field(default_factory=list)

    def has_dependency(self, name: str) -> bool:
        return name in self.dependencies

    def has_dev_dependency(self, name: str) -> bool:
        return name in self.dev_dependencies

    def has_any(self, name: str) -> bool:
        return self.has_dependency(name) or self.has_dev_dependency(name)

    @property
    def sdk_constraint(self) -> str:
        return self.environment.get("sdk", "")

    @property
    def has_linter(self) -> bool:
        return any(self.has_dev_dependency(name) for name in LINTER_PACKAGES)

    @property
    def has_icon_config(self) -> bool:
        if self.has_any("flutter_launcher_icons"):
            return True
        return any(section in self.top_level_sections for section in _ICON_SECTIONS)

    @property
    def has_splash_config(self) -> bool:
        if self.has_any("flutter_native_splash"):
            return True
        return any(section in self.top_level_sections for section in _SPLASH_SECTIONS)

    @property
    def deprecated_packages(self) -> List[str]:
        return [name for name in DEPRECATED_PACKAGES if self.has_any(name)]

    @property
    def has_deprecated_package(self) -> bool:
        return bool(self.deprecated_packages)

    @property
    def debug_packages_in_main(self) -> List[str]:
        return [name for name in DEBUG_PACKAGES if self.has_dependency(name)]

    @property
    def has_debug_deps_in_main(self) -> bool:
        return bool(self.debug_packages_in_main)

    @property
    def is_default_version(self) -> bool:
        return self.version in ("1.0.0+1", "1.0.0")


def parse_pubspec(path: Path) -> Pubspec:
    pubspec = Pubspec()
    text = read_text(path, _LOGGER)
    if text is None:
        return pubspec

    section: Optional[str] = None
    child_indent: Optional[int] = None
    pending: Optional[Tuple[str, List[str]]] = None

    def flush() -> None:
        nonlocal pending
        if pending is None or section is None:
            pending = None
            return
        key, parts = pending
        _section_map(pubspec, section)[key] = ", ".join(parts)
        pending = None

    for raw in text.splitlines():
        stripped = raw.strip()
        if not stripped or stripped.startswith("#"):
            continue
        indent = len(raw) - len(raw.lstrip(" \t"))
        key, value = _split_entry(stripped)

        if indent == 0:
            flush()
            section, child_indent = None, None
            if key is None:
                continue
            pubspec.top_level_sections.append(key)
            if key in _SCALAR_FIELDS and value:
                setattr(pubspec, key, value)
            elif not value and (key in _MAP_SECTIONS or key == "flutter"):
                section = key
                pubspec.has_flutter_section = pubspec.has_flutter_section or key == "flutter"
            continue

        if section is None:
            continue
        if child_indent is None:
            child_indent = indent

        if section == "flutter":
            _apply_flutter_line(pubspec, stripped, key, value, indent, child_indent)
            continue

        if indent == child_indent:
            flush()
            if key is None:
                continue
            if value or section == "environment":
                _section_map(pubspec, section)[key] = value
            else:
                pending = (key, [])
        elif indent > child_indent and pending is not None and key is not None and value:
            pending[1].append(f"{key}: {value}")

    flush()
    return pubspec


def _section_map(pubspec: Pubspec, section: str) -> Dict[str, str]:
    if section == "dependencies":
        return pubspec.dependencies
    if section == "dev_dependencies":
        return pubspec.dev_dependencies
    return pubspec.environment


def _apply_flutter_line(
    pubspec: Pubspec,
    stripped: str,
    key: Optional[str],
    value: str,
    indent: int,
    child_indent: int,
) -> None:
    if indent == child_indent and key == "uses-material-design":
        pubspec.uses_material_design = value.lower() == "true"
    elif indent > child_indent and stripped.startswith("- "):
        pubspec.assets.append(_unquote(stripped[2:].strip()))


def _split_entry(stripped: str) -> Tuple[Optional[str], str]:
    if stripped.startswith("- "):
        stripped = stripped[2:].lstrip()
    if ":" not in stripped:
        return None, ""
    key, _, value = stripped.partition(":")
    key = _unquote(key.strip())
    if not key or " " in key:
        return None, ""
    return key, _unquote(_strip_comment(value.strip()))


def _strip_comment(value: str) -> str:
    if value.startswith(("'", '"')):
        return value
    marker = value.find(" #")
    return value[:marker].rstrip() if marker != -1 else value


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


__all__ = [
    "DEBUG_PACKAGES",
    "DEPRECATED_PACKAGES",
    "LINTER_PACKAGES",
    "Pubspec",
    "parse_pubspec",
]
