"""vm-launch package."""

__all__ = [
    "cli",
    "config",
    "constants",
    "exceptions",
    "launcher",
    "models",
    "qemu",
    "session",
    "utils",
]
