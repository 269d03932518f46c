"""QEMU command-line construction for vm-launch."""

from __future__ import annotations

from pathlib import Path
from typing import List, Tuple

from vmlaunch.constants import (
    BASIC_LOG_CATEGORIES,
    DISK_FORMAT,
    QEMU_BINARY,
    QEMU_IMG_BINARY,
    TCG_CPU_MODEL,
    VERBOSE_LOG_CATEGORIES,
    VERBOSE_VM_TYPE,
)
from vmlaunch.models import EffectiveSettings


def log_categories(vm_type: str) -> Tuple[str, ...]:
    """Minimal VMs are used for analysis work and get verbose QEMU logging."""
    if vm_type == VERBOSE_VM_TYPE:
        return VERBOSE_LOG_CATEGORIES
    return BASIC_LOG_CATEGORIES


def disk_image_command(disk_path: Path, size: str) -> List[str]:
    return [QEMU_IMG_BINARY, "create", "-f", DISK_FORMAT, str(disk_path), size]


def build_qemu_command(settings: EffectiveSettings, kvm: bool = True) -> List[str]:
    cmd = [
        QEMU_BINARY,
        "-name",
        settings.vm_name,
        "-m",
        str(settings.memory_mb),
        "-smp",
        str(settings.cpus),
    ]
    if kvm:
        cmd += ["-cpu", "host", "-enable-kvm"]
    else:
        cmd += ["-cpu", TCG_CPU_MODEL, "-accel", "tcg"]

    drive = f"file={settings.disk_path},format={DISK_FORMAT}"
    if settings.snapshot:
        drive += ",snapshot=on"
    cmd += ["-drive", drive]

    if settings.iso:
        cmd += ["-cdrom", settings.iso]

    if settings.network == "none":
        cmd += ["-net", "none"]
    elif settings.network == "user":
        cmd += ["-net", "nic,model=virtio", "-net", f"user,hostname={settings.vm_name}"]

    cmd += ["-vga", "virtio", "-display", settings.display]

    # d = CD-ROM, c = first hard disk
    cmd += ["-boot", "d" if settings.iso else "c"]

    cmd += ["-fw_cfg", f"name=opt/hostname,string={settings.vm_name}"]

    cmd += ["-D", str(settings.log_path), "-d", ",".join(log_categories(settings.vm_type))]
    return cmd
