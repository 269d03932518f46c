"""Config file loading and override resolution for vm-launch."""

from __future__ import annotations

import shlex
from pathlib import Path
from typing import Dict, List, Optional

try:
    import yaml  # type: ignore
except ImportError as exc:  # pragma: no cover
    raise SystemExit("PyYAML is required but not installed") from exc

from vmlaunch.constants import (
    CONFIG_KEY_RE,
    CONFIG_SUFFIXES,
    DEFAULT_DISPLAY,
    DEFAULT_NETWORK,
    DISK_FORMAT,
    FALSY,
    KNOWN_CONFIG_KEYS,
    NETWORK_MODES,
    REQUIRED_CONFIG_KEYS,
    TRUTHY,
    WORDS_FILE,
    YAML_SUFFIXES,
)
from vmlaunch.exceptions import LaunchError
from vmlaunch.models import EffectiveSettings, Layout, Overrides, VMConfig
from vmlaunch.utils import (
    derive_vm_name,
    log,
    parse_memory_mb,
    parse_positive_int,
    session_timestamp,
    validate_disk_size,
)


def list_configs(config_dir: Path) -> List[Path]:
    if not config_dir.is_dir():
        return []
    return sorted(p for p in config_dir.iterdir() if p.is_file() and p.suffix in CONFIG_SUFFIXES)


def resolve_config_path(raw: str, config_dir: Optional[Path] = None) -> Path:
    """Find a config by path, or by name inside the config directory.

    ``config/windows-minimal.conf``, ``windows-minimal.conf`` and
    ``windows-minimal`` all resolve to the same file when run from the
    project root.
    """
    candidate = Path(raw).expanduser()
    if candidate.is_file():
        return candidate
    if config_dir is not None and not candidate.is_absolute():
        named = config_dir / raw
        if named.is_file():
            return named
        for suffix in CONFIG_SUFFIXES:
            with_suffix = config_dir / f"{raw}{suffix}"
            if with_suffix.is_file():
                return with_suffix
    raise LaunchError(f"Config file not found: {raw}")


def parse_conf_text(text: str, source: str = "<config>") -> Dict[str, str]:
    """Parse shell-style KEY=VALUE assignments without evaluating them."""
    values: Dict[str, str] = {}
    for lineno, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        key, sep, raw_value = line.partition("=")
        key = key.strip()
        if not sep or not CONFIG_KEY_RE.match(key):
            raise LaunchError(f"{source}:{lineno}: expected KEY=VALUE, got '{raw_line.strip()}'")
        try:
            tokens = shlex.split(raw_value, comments=True)
        except ValueError as exc:
            raise LaunchError(f"{source}:{lineno}: cannot parse value for {key}: {exc}")
        values[key] = " ".join(tokens)
    return values


def parse_yaml_text(text: str, source: str = "<config>") -> Dict[str, str]:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise LaunchError(f"{source} contains invalid YAML: {exc}")
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise LaunchError(f"{source} must contain a YAML mapping, got {type(data).__name__}")
    values: Dict[str, str] = {}
    for key, value in data.items():
        if value is None:
            text_value = ""
        elif isinstance(value, bool):
            # YAML 1.1 turns on/off into booleans
            text_value = "on" if value else "off"
        else:
            text_value = str(value)
        values[str(key)] = text_value
    return values


def _parse_switch(key: str, raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in TRUTHY:
        return True
    if lowered in FALSY:
        return False
    raise LaunchError(f"{key} must be on or off (got '{raw}')")


def _optional(values: Dict[str, str], key: str) -> Optional[str]:
    value = values.get(key, "").strip()
    return value or None


def build_vm_config(values: Dict[str, str], source: Path) -> VMConfig:
    missing = [key for key in REQUIRED_CONFIG_KEYS if not values.get(key, "").strip()]
    if missing:
        raise LaunchError(f"{source}: missing required setting(s): {', '.join(missing)}")

    for key in sorted(set(values) - KNOWN_CONFIG_KEYS):
        log("DEBUG", f"{source}: ignoring unknown setting {key}")

    network = (values.get("NETWORK") or DEFAULT_NETWORK).strip().lower() or DEFAULT_NETWORK
    if network not in NETWORK_MODES:
        supported = ", ".join(sorted(NETWORK_MODES))
        raise LaunchError(f"{source}: unsupported NETWORK '{network}'. Supported: {supported}")

    return VMConfig(
        prefix=values["VM_PREFIX"].strip(),
        vm_type=values["VM_TYPE"].strip(),
        source=source,
        default_memory=_optional(values, "DEFAULT_MEMORY"),
        default_cpus=_optional(values, "DEFAULT_CPUS"),
        default_disk_size=_optional(values, "DEFAULT_DISK_SIZE"),
        default_iso=_optional(values, "DEFAULT_ISO"),
        snapshot=_parse_switch("SNAPSHOT", values.get("SNAPSHOT", "off")),
        network=network,
        display=_optional(values, "DISPLAY") or DEFAULT_DISPLAY,
    )


def load_vm_config(config_path: Path) -> VMConfig:
    if not config_path.is_file():
        raise LaunchError(f"Config file not found: {config_path}")
    try:
        text = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise LaunchError(f"Cannot read config file {config_path}: {exc}")
    if config_path.suffix.lower() in YAML_SUFFIXES:
        values = parse_yaml_text(text, str(config_path))
    else:
        values = parse_conf_text(text, str(config_path))
    return build_vm_config(values, config_path)


def resolve_iso_path(raw: str, image_dir: Path) -> str:
    """Return the ISO path as given, or its match in the image directory.

    A bare name such as ``win11.iso`` that does not exist relative to the
    working directory is looked up in ``image/``. Paths that exist nowhere
    are passed through unchanged.
    """
    candidate = Path(raw).expanduser()
    if candidate.exists() or candidate.is_absolute():
        return raw
    in_image_dir = image_dir / raw
    if in_image_dir.is_file():
        return str(in_image_dir)
    return raw


def _pick(override: Optional[str], default: Optional[str]) -> Optional[str]:
    if override is not None and override.strip():
        return override.strip()
    return default


def _require(name: str, value: Optional[str], flag: str) -> str:
    if value is None:
        raise LaunchError(f"No {name} given: set {flag} or add it to the config file")
    return value


def resolve_settings(
    cfg: VMConfig,
    overrides: Overrides,
    layout: Layout,
    timestamp: Optional[str] = None,
    words_file: Path = WORDS_FILE,
) -> EffectiveSettings:
    """Apply CLI overrides on top of config defaults.

    A non-empty override always wins; otherwise the config default is used.
    Memory, CPUs and disk size must come from one or the other.
    """
    memory_raw = _require("memory", _pick(overrides.memory, cfg.default_memory), "-m or DEFAULT_MEMORY")
    cpus_raw = _require("CPU count", _pick(overrides.cpus, cfg.default_cpus), "-p or DEFAULT_CPUS")
    disk_size = _require(
        "disk size", _pick(overrides.disk_size, cfg.default_disk_size), "-s or DEFAULT_DISK_SIZE"
    )
    memory_mb = parse_memory_mb(memory_raw)
    cpus = parse_positive_int("CPUs", cpus_raw)
    validate_disk_size(disk_size)
    iso = _pick(overrides.iso, cfg.default_iso)
    if iso is not None:
        iso = resolve_iso_path(iso, layout.image_dir)

    vm_name = derive_vm_name(cfg.prefix, overrides.name, words_file)
    if timestamp is None:
        timestamp = session_timestamp()

    return EffectiveSettings(
        vm_name=vm_name,
        vm_type=cfg.vm_type,
        memory_mb=memory_mb,
        cpus=cpus,
        disk_size=disk_size,
        iso=iso,
        snapshot=cfg.snapshot,
        network=cfg.network,
        display=cfg.display,
        disk_path=layout.disk_dir / f"{vm_name}.{DISK_FORMAT}",
        log_path=layout.log_dir / f"{vm_name}_{timestamp}.log",
        config_path=cfg.source,
        timestamp=timestamp,
    )
