"""CLI entry points for vm-launch."""

from __future__ import annotations

import argparse
import dataclasses
import shutil
import sys
from pathlib import Path
from typing import List, Optional

from vmlaunch.config import list_configs, load_vm_config, resolve_config_path, resolve_settings
from vmlaunch.constants import QEMU_BINARY, QEMU_IMG_BINARY
from vmlaunch.exceptions import LaunchError
from vmlaunch.launcher import Launcher
from vmlaunch.models import EffectiveSettings, Layout, Overrides
from vmlaunch.qemu import build_qemu_command
from vmlaunch.utils import kvm_available, log

LOGO = r"""
  ____  _____ __  __ _   _
 / __ \|  ___||  \/  | | | |
| |  | | |__  | |\/| | | | |
| |  | |  __| | |  | | | | |
| |__| | |___ | |  | | |_| |
 \___\_\_____||_|  |_|\___/

    VM Initialization Script
"""

USAGE = """\
Usage: {prog} -c CONFIG [OPTIONS]

Launch QEMU VMs using configuration files.

REQUIRED:
    -c, --config PATH       Path to config file (e.g., config/windows-minimal.conf)

OPTIONS:
    -i, --iso PATH          Path to ISO file, or a name under image/ (overrides config default)
    -m, --memory SIZE       Memory in MB, or with M/G suffix (overrides config default)
    -p, --cpus COUNT        Number of CPUs (overrides config default)
    -s, --size SIZE         Disk size (overrides config default)
    -n, --name SUFFIX       Custom name suffix (default: random word)
    -h, --help              Show this help message

    --list-configs          List available config files and exit
    --show-config           Show resolved settings and QEMU command, then exit
    --dry-run               Validate config and environment, then exit

EXAMPLES:
    # Install new Windows VM
    {prog} -c config/windows-standard.conf -i image/win11.iso -n base

    # Run malware analysis (snapshot mode)
    {prog} -c config/windows-minimal.conf -n base

    # Custom Linux VM with more resources
    {prog} -c config/linux-standard.conf -i image/ubuntu.iso -m 8192 -p 8
"""


def build_parser() -> argparse.ArgumentParser:
    # Help output is rendered by print_help so it can list the config directory.
    parser = argparse.ArgumentParser(prog="vm-launch", add_help=False, allow_abbrev=False)
    parser.add_argument("-c", "--config")
    parser.add_argument("-i", "--iso")
    parser.add_argument("-m", "--memory")
    parser.add_argument("-p", "--cpus")
    parser.add_argument("-s", "--size")
    parser.add_argument("-n", "--name")
    parser.add_argument("-h", "--help", action="store_true")
    parser.add_argument("--list-configs", action="store_true")
    parser.add_argument("--show-config", action="store_true")
    parser.add_argument("--dry-run", action="store_true")
    return parser


def show_logo() -> None:
    print(LOGO, flush=True)


def print_available_configs(config_dir: Path) -> None:
    for conf in list_configs(config_dir):
        print(f"    - {conf.name}")


def print_help(layout: Layout) -> None:
    show_logo()
    print(USAGE.format(prog="vm-launch"))
    print("AVAILABLE CONFIGS:")
    print_available_configs(layout.config_dir)
    print(flush=True)


def show_settings(settings: EffectiveSettings) -> None:
    """Print the resolved settings, one field per line."""
    for field in dataclasses.fields(settings):
        print(f"  {field.name}: {getattr(settings, field.name)}")


def print_vm_summary(settings: EffectiveSettings) -> None:
    rule = "=" * 42
    lines = [
        f"Name:     {settings.vm_name}",
        f"Type:     {settings.vm_type}",
        f"Memory:   {settings.memory_mb}MB",
        f"CPUs:     {settings.cpus}",
        f"Disk:     {settings.disk_path}",
    ]
    if settings.iso:
        lines.append(f"ISO:      {settings.iso}")
    lines += [
        f"Snapshot: {'on' if settings.snapshot else 'off'}",
        f"Network:  {settings.network}",
        f"Log:      {settings.log_path}",
    ]
    print()
    print(rule)
    print("VM Configuration")
    print(rule)
    for line in lines:
        print(line)
    print(rule)
    print(flush=True)


def dry_run(settings: EffectiveSettings) -> int:
    log("INFO", "=== Configuration ===")
    show_settings(settings)
    log("INFO", "=== Environment Checks ===")
    kvm = kvm_available()
    if kvm:
        log("SUCCESS", "KVM:         available (/dev/kvm)")
    else:
        log("WARN", "KVM:         NOT available (will use TCG)")
    for binary in (QEMU_BINARY, QEMU_IMG_BINARY):
        found = shutil.which(binary)
        if found:
            log("SUCCESS", f"{binary}: {found}")
        else:
            log("ERROR", f"{binary}: NOT FOUND on PATH")
    if settings.iso:
        if Path(settings.iso).exists():
            log("SUCCESS", f"ISO:         {settings.iso} (found)")
        else:
            log("ERROR", f"ISO:         {settings.iso} (NOT FOUND)")
    if settings.disk_path.exists():
        log("INFO", f"Disk:        {settings.disk_path} (exists, will be reused)")
    else:
        log("INFO", f"Disk:        {settings.disk_path} (will be created, {settings.disk_size})")
    log("INFO", "QEMU command:")
    print(" ".join(build_qemu_command(settings, kvm=kvm)), flush=True)
    log("INFO", "=== Dry-run complete (no VM started) ===")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    layout = Layout.default()

    if not argv:
        print_help(layout)
        return 0

    args, unknown = build_parser().parse_known_args(argv)
    if args.help:
        print_help(layout)
        return 0
    if unknown:
        log("ERROR", f"Unknown option: {unknown[0]}")
        print_help(layout)
        return 0

    if args.list_configs:
        configs = list_configs(layout.config_dir)
        if not configs:
            log("WARN", f"No config files found in {layout.config_dir}")
            return 0
        for conf in configs:
            print(f"  {conf.name}")
        return 0

    if not args.config:
        log("ERROR", "Config file required. Use -c to specify a config file.")
        print_help(layout)
        return 1

    overrides = Overrides(
        memory=args.memory,
        cpus=args.cpus,
        disk_size=args.size,
        iso=args.iso,
        name=args.name,
    )
    try:
        config_path = resolve_config_path(args.config, layout.config_dir)
        log("INFO", f"Loading config: {config_path}")
        cfg = load_vm_config(config_path)
        settings = resolve_settings(cfg, overrides, layout)
    except LaunchError as exc:
        log("ERROR", str(exc))
        return exc.exit_code

    if args.show_config:
        show_settings(settings)
        print(" ".join(build_qemu_command(settings, kvm=kvm_available())), flush=True)
        return 0

    if args.dry_run:
        return dry_run(settings)

    show_logo()
    print_vm_summary(settings)

    launcher = Launcher(settings)
    try:
        launcher.prepare()
        return launcher.launch()
    except LaunchError as exc:
        log("ERROR", str(exc))
        return exc.exit_code
    except Exception as exc:
        log("ERROR", f"Unexpected error: {exc}")
        import traceback

        traceback.print_exc()
        return 1
