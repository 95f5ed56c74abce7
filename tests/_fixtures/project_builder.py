"""Helper utilities for constructing temporary Flutter projects in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Mapping

from fsct.project import Project, build_project

ANDROID_NS = 'xmlns:android="http://schemas.android.com/apk/res/android"'


def manifest_xml(application_attrs: str = "", body: str = "", *, package: str = "com.acme.app") -> str:
    """Return a minimal AndroidManifest.xml with the android namespace declared."""
    return (
        f'<manifest {ANDROID_NS} package="{package}">\n'
        f"{body}\n"
        f"  <application {application_attrs}>\n"
        "  </application>\n"
        "</manifest>\n"
    )


def info_plist(entries: Mapping[str, str]) -> str:
    """Return an Info.plist document holding ``key -> string`` entries."""
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        "<plist version=\"1.0\">",
        "<dict>",
    ]
    for key, value in entries.items():
        lines.append(f"  <key>{key}</key>")
        lines.append(f"  <string>{value}</string>")
    lines.extend(["</dict>", "</plist>", ""])
    return "\n".join(lines)


class ProjectBuilder:
    """Utility for writing files into a throwaway Flutter project and snapshotting it."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "app"
        self.root.mkdir()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the project."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def write_bytes(self, relative: str, data: bytes) -> None:
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    def mkdir(self, *relatives: str) -> None:
        for relative in relatives:
            (self.root / relative).mkdir(parents=True, exist_ok=True)

    def build(self, *, android: bool = True, ios: bool = True) -> Project:
        """Return a fresh snapshot of the project contents."""
        return build_project(self.root, android=android, ios=ios)

    def path(self) -> Path:
        """Return the project root path."""
        return self.root


__all__ = ["ANDROID_NS", "ProjectBuilder", "info_plist", "manifest_xml"]
