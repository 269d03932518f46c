"""Global constants and path configuration for vm-launch."""

from __future__ import annotations

import os
import re
from pathlib import Path

# VM_ROOT pins the project root holding disc/, image/, config/ and logs/.
# Without it, the current working directory is used.
_VM_ROOT = os.environ.get("VM_ROOT")
PROJECT_ROOT = Path(_VM_ROOT) if _VM_ROOT else Path.cwd()

DISK_DIR_NAME = "disc"
IMAGE_DIR_NAME = "image"
CONFIG_DIR_NAME = "config"
LOG_DIR_NAME = "logs"

CONFIG_SUFFIXES = (".conf", ".yaml", ".yml")
YAML_SUFFIXES = {".yaml", ".yml"}

QEMU_BINARY = "qemu-system-x86_64"
QEMU_IMG_BINARY = "qemu-img"
DISK_FORMAT = "qcow2"
TCG_CPU_MODEL = "qemu64"

WORDS_FILE = Path("/usr/share/dict/words")

TRUTHY = {"1", "true", "yes", "on"}
FALSY = {"0", "false", "no", "off", ""}

_LOG_VERBOSE = os.environ.get("LOG_VERBOSE", "").lower() in TRUTHY

DISK_SIZE_RE = re.compile(r"^\d+[KMGTkmgt]?$")
MEMORY_RE = re.compile(r"^(\d+)([MGmg])?$")
CONFIG_KEY_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

SESSION_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"

NETWORK_MODES = {"none", "user"}
DEFAULT_NETWORK = "user"
DEFAULT_DISPLAY = "gtk"

# QEMU -d categories per VM type; anything other than "minimal" gets the basic set.
VERBOSE_VM_TYPE = "minimal"
VERBOSE_LOG_CATEGORIES = ("guest_errors", "cpu_reset", "int", "page")
BASIC_LOG_CATEGORIES = ("guest_errors",)

REQUIRED_CONFIG_KEYS = ("VM_PREFIX", "VM_TYPE")
KNOWN_CONFIG_KEYS = {
    "VM_PREFIX",
    "VM_TYPE",
    "DEFAULT_MEMORY",
    "DEFAULT_CPUS",
    "DEFAULT_DISK_SIZE",
    "DEFAULT_ISO",
    "SNAPSHOT",
    "NETWORK",
    "DISPLAY",
}
