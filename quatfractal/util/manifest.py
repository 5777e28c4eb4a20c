import dataclasses
import json
import os
import platform
import subprocess
import sys
import time
from dataclasses import dataclass
from importlib import metadata
from typing import Any, Dict, Optional

from quatfractal.config import RenderSettings

TRACKED_PACKAGES = ("numpy", "Pillow", "tqdm", "natsort", "opencv-python")


@dataclass(frozen=True)
class RunManifest:
    started_utc: str
    settings: Dict[str, Any]
    python: Dict[str, Any]
    packages: Dict[str, str]
    git: Dict[str, Any]
    system: Dict[str, Any]
    renderer: Dict[str, Any]


def _utc_iso() -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())


def _pkg_version(name: str) -> Optional[str]:
    try:
        return metadata.version(name)
    except metadata.PackageNotFoundError:
        return None


def git_commit() -> Optional[str]:
    try:
        r = subprocess.run(["git", "rev-parse", "HEAD"], capture_output=True, text=True, check=True)
    except (OSError, subprocess.CalledProcessError):
        return None
    return r.stdout.strip() or None


def build_manifest(*, settings: RenderSettings, renderer_info: Dict[str, Any], commit: Optional[str]) -> RunManifest:
    pkgs = {}
    for name in TRACKED_PACKAGES:
        v = _pkg_version(name)
        if v:
            pkgs[name] = v

    return RunManifest(
        started_utc=_utc_iso(),
        settings=dataclasses.asdict(settings),
        python={"version": sys.version, "executable": sys.executable},
        packages=pkgs,
        git={"commit": commit},
        system={"platform": platform.platform(), "machine": platform.machine(), "cpu_count": os.cpu_count()},
        renderer=renderer_info,
    )


def write_manifest(path: str, manifest: RunManifest) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(dataclasses.asdict(manifest), f, indent=2, sort_keys=True)
