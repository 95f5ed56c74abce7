"""Android launcher-icon discovery under ``res/mipmap-*``."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List

from ..logging import get_logger

_LOGGER = get_logger("parsers.resources")

MIPMAP_DIRS = ("mipmap-hdpi", "mipmap-mdpi", "mipmap-xhdpi", "mipmap-xxhdpi", "mipmap-xxxhdpi")
_ICON_SUFFIXES = (".png", ".webp")
_PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


@dataclass(frozen=True)
class LauncherIcon:
    """A bitmap found in a mipmap directory, relative to ``res/``."""

    density: str
    name: str
    size: int
    is_png: bool

    @property
    def relative(self) -> str:
        return f"{self.density}/{self.name}"


def scan_launcher_icons(res_dir: Path) -> List[LauncherIcon]:
    icons: List[LauncherIcon] = []
    for density in MIPMAP_DIRS:
        directory = res_dir / density
        if not directory.is_dir():
            continue
        for path in sorted(directory.iterdir()):
            if not path.is_file() or not path.name.endswith(_ICON_SUFFIXES):
                continue
            try:
                with path.open("rb") as handle:
                    header = handle.read(len(_PNG_SIGNATURE))
                size = path.stat().st_size
            except OSError as exc:
                _LOGGER.warning("Unable to read %s: %s", path, exc)
                continue
            icons.append(
                LauncherIcon(
                    density=density,
                    name=path.name,
                    size=size,
                    is_png=header == _PNG_SIGNATURE,
                )
            )
    return icons


__all__ = ["LauncherIcon", "MIPMAP_DIRS", "scan_launcher_icons"]
