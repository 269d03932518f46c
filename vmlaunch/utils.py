"""Utility functions for vm-launch."""

from __future__ import annotations

import os
import random
import subprocess
import time
from pathlib import Path
from typing import List, Optional

from vmlaunch.constants import (
    _LOG_VERBOSE,
    DISK_SIZE_RE,
    MEMORY_RE,
    SESSION_TIMESTAMP_FORMAT,
    TRUTHY,
    WORDS_FILE,
)
from vmlaunch.exceptions import LaunchError


def log(level: str, message: str) -> None:
    """Lightweight structured logging with coloured level tags."""
    if level == "DEBUG" and not _LOG_VERBOSE:
        return
    colours = {
        "INFO": "\033[0;34m",
        "WARN": "\033[1;33m",
        "ERROR": "\033[0;31m",
        "SUCCESS": "\033[0;32m",
        "DEBUG": "\033[0;90m",
    }
    colour = colours.get(level, "")
    reset = "\033[0m" if colour else ""
    print(f"{colour}[{level}]{reset} {message}", flush=True)


def get_env_bool(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.lower() in TRUTHY


def parse_positive_int(name: str, raw: str, min_val: int = 1) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise LaunchError(f"{name} must be an integer (got '{raw}')")
    if value < min_val:
        raise LaunchError(f"{name} must be >= {min_val} (got {value})")
    return value


def parse_memory_mb(raw: str) -> int:
    """Memory in MB; an M or G suffix is accepted as QEMU does."""
    match = MEMORY_RE.match(raw.strip())
    if not match:
        raise LaunchError(f"Memory must be a number of MB or use an M/G suffix (got '{raw}')")
    value = int(match.group(1))
    if (match.group(2) or "").upper() == "G":
        value *= 1024
    if value < 1:
        raise LaunchError(f"Memory must be >= 1 MB (got '{raw}')")
    return value


def validate_disk_size(raw: str) -> str:
    if not DISK_SIZE_RE.match(raw):
        raise LaunchError(
            f"Invalid disk size '{raw}'. Use a number with optional suffix: K, M, G, T (e.g. '20G')"
        )
    return raw


def ensure_directory(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def kvm_available() -> bool:
    """Return True if /dev/kvm exists and can be opened."""
    kvm_path = Path("/dev/kvm")
    if not kvm_path.exists():
        return False
    try:
        fd = os.open(kvm_path, os.O_RDWR)
    except OSError:
        return False
    else:
        os.close(fd)
        return True


def session_timestamp() -> str:
    return time.strftime(SESSION_TIMESTAMP_FORMAT)


def random_word(words_file: Path = WORDS_FILE) -> str:
    """Pick a random lowercase word from a system word list."""
    try:
        lines = words_file.read_text(errors="replace").splitlines()
    except OSError:
        raise LaunchError(
            f"Word list not available at {words_file}; pass a name suffix with -n/--name"
        )
    words = [line.strip().replace("'", "").lower() for line in lines]
    words = [word for word in words if word]
    if not words:
        raise LaunchError(f"Word list {words_file} is empty; pass a name suffix with -n/--name")
    return random.choice(words)


def derive_vm_name(prefix: str, suffix: Optional[str] = None, words_file: Path = WORDS_FILE) -> str:
    if suffix is not None and suffix.strip():
        host_name = suffix.strip()
    else:
        host_name = random_word(words_file)
    return f"{prefix}-{host_name}"


def run(cmd: List[str], check: bool = True, **kwargs) -> subprocess.CompletedProcess:
    """Run command with logging."""
    log("DEBUG", f"Running: {' '.join(cmd)}")
    result = subprocess.run(cmd, check=check, text=True, **kwargs)
    return result
