"""Per-session log file for vm-launch."""

from __future__ import annotations

import time
from pathlib import Path
from typing import List

from vmlaunch.models import EffectiveSettings

RULE = "=" * 42


def _now() -> str:
    return time.strftime("%a %b %d %H:%M:%S %Z %Y")


class SessionLog:
    """Append-only session metadata written around one hypervisor run."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def _append(self, lines: List[str]) -> None:
        with open(self.path, "a") as f:
            f.write("\n".join(lines) + "\n")
            f.flush()

    def write_header(self, settings: EffectiveSettings) -> None:
        lines = [
            RULE,
            "QEMU VM Session Log",
            RULE,
            f"Date:       {_now()}",
            f"VM Name:    {settings.vm_name}",
            f"VM Type:    {settings.vm_type}",
            f"Config:     {settings.config_path}",
            f"Memory:     {settings.memory_mb}MB",
            f"CPUs:       {settings.cpus}",
            f"Snapshot:   {'on' if settings.snapshot else 'off'}",
            f"Network:    {settings.network}",
            f"Disk:       {settings.disk_path}",
        ]
        if settings.iso:
            lines.append(f"ISO:        {settings.iso}")
        lines += [RULE, ""]
        self._append(lines)

    def write_footer(self) -> None:
        self._append(["", f"Session ended: {_now()}"])
