"""Xcode project and asset-catalog readers."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple

from ..logging import get_logger
from ._io import read_text

_LOGGER = get_logger("parsers.xcode")

_DEPLOYMENT_TARGET = re.compile(r"IPHONEOS_DEPLOYMENT_TARGET\s*=\s*([0-9.]+)")


def parse_deployment_target(pbxproj: Path) -> str:
    """Return the first ``IPHONEOS_DEPLOYMENT_TARGET`` value, or ``""``."""
    text = read_text(pbxproj, _LOGGER)
    if text is None:
        return ""
    match = _DEPLOYMENT_TARGET.search(text)
    return match.group(1) if match else ""


@dataclass
class AppIconSet:
    """Contents of ``AppIcon.appiconset``; ``images`` holds (size, idiom) pairs."""

    exists: bool = False
    images: List[Tuple[str, str]] = field(default_factory=list)

    def has_image(self, size: str, idiom: str) -> bool:
        return (size, idiom) in self.images


def parse_app_icon_set(directory: Path) -> AppIconSet:
    if not directory.is_dir():
        return AppIconSet()

    icon_set = AppIconSet(exists=True)
    text = read_text(directory / "Contents.json", _LOGGER)
    if text is None:
        return icon_set
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        _LOGGER.warning("Malformed %s: %s", directory / "Contents.json", exc)
        return icon_set

    images = data.get("images") if isinstance(data, dict) else None
    for image in images or []:
        if not isinstance(image, dict):
            continue
        size, idiom = image.get("size"), image.get("idiom")
        if isinstance(size, str) and isinstance(idiom, str):
            icon_set.images.append((size, idiom))
    return icon_set


__all__ = ["AppIconSet", "parse_app_icon_set", "parse_deployment_target"]
