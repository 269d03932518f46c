"""Data models for vm-launch."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from vmlaunch.constants import (
    CONFIG_DIR_NAME,
    DEFAULT_DISPLAY,
    DEFAULT_NETWORK,
    DISK_DIR_NAME,
    IMAGE_DIR_NAME,
    LOG_DIR_NAME,
    PROJECT_ROOT,
)


@dataclass(frozen=True)
class VMConfig:
    """Settings loaded from one config file."""

    prefix: str
    vm_type: str
    source: Path
    default_memory: Optional[str] = None
    default_cpus: Optional[str] = None
    default_disk_size: Optional[str] = None
    default_iso: Optional[str] = None
    snapshot: bool = False
    network: str = DEFAULT_NETWORK
    display: str = DEFAULT_DISPLAY


@dataclass(frozen=True)
class Overrides:
    memory: Optional[str] = None
    cpus: Optional[str] = None
    disk_size: Optional[str] = None
    iso: Optional[str] = None
    name: Optional[str] = None


@dataclass(frozen=True)
class Layout:
    root: Path

    @classmethod
    def default(cls) -> "Layout":
        return cls(root=PROJECT_ROOT)

    @property
    def disk_dir(self) -> Path:
        return self.root / DISK_DIR_NAME

    @property
    def image_dir(self) -> Path:
        return self.root / IMAGE_DIR_NAME

    @property
    def config_dir(self) -> Path:
        return self.root / CONFIG_DIR_NAME

    @property
    def log_dir(self) -> Path:
        return self.root / LOG_DIR_NAME


@dataclass(frozen=True)
class EffectiveSettings:
    """Resolved launch parameters after overrides are applied."""

    vm_name: str
    vm_type: str
    memory_mb: int
    cpus: int
    disk_size: str
    iso: Optional[str]
    snapshot: bool
    network: str
    display: str
    disk_path: Path
    log_path: Path
    config_path: Path
    timestamp: str
