"""Tests for the pubspec.yaml line parser."""

from __future__ import annotations

from pathlib import Path

from fsct.parsers import parse_pubspec

PUBSPEC = """
name: acme_app
description: "Acme shopping app"
version: 2.1.0+14
publish_to: 'none'

environment:
  sdk: ">=3.0.0 <4.0.0"

dependencies:
  flutter:
    sdk: flutter
  http: ^1.1.0  # networking
  camera: ^0.10.5
  package_info: ^2.0.0
  mockito: ^5.4.0

dev_dependencies:
  flutter_test:
    sdk: flutter
  flutter_lints: ^3.0.0

flutter_native_splash:
  color: "#ffffff"

flutter:
  uses-material-design: true
  assets:
    - assets/images/
"""


def _parse(tmp_path: Path, text: str = PUBSPEC):
    path = tmp_path / "pubspec.yaml"
    path.write_text(text, encoding="utf-8")
    return parse_pubspec(path)


def test_parse_scalars_and_sections(tmp_path: Path) -> None:
    pubspec = _parse(tmp_path)

    assert pubspec.name == "acme_app"
    assert pubspec.description == "Acme shopping app"
    assert pubspec.version == "2.1.0+14"
    assert pubspec.publish_to == "none"
    assert pubspec.sdk_constraint == ">=3.0.0 <4.0.0"
    assert pubspec.dependencies["http"] == "^1.1.0"
    assert pubspec.dependencies["flutter"] == "sdk: flutter"
    assert pubspec.dev_dependencies["flutter_lints"] == "^3.0.0"
    assert pubspec.has_flutter_section
    assert pubspec.uses_material_design
    assert pubspec.assets == ["assets/images/"]


def test_derived_flags(tmp_path: Path) -> None:
    pubspec = _parse(tmp_path)

    assert pubspec.has_linter
    assert pubspec.has_splash_config
    assert not pubspec.has_icon_config
    assert pubspec.deprecated_packages == ["package_info"]
    assert pubspec.debug_packages_in_main == ["mockito"]
    assert not pubspec.is_default_version


def test_version_stays_empty_when_absent(tmp_path: Path) -> None:
    pubspec = _parse(tmp_path, "name: bare\n")

    assert pubspec.name == "bare"
    assert pubspec.version == ""
    assert pubspec.dependencies == {}


def test_missing_pubspec_yields_empty_record(tmp_path: Path) -> None:
    pubspec = parse_pubspec(tmp_path / "pubspec.yaml")

    assert pubspec.name == ""
    assert not pubspec.has_flutter_section
