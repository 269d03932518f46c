"""VM launch lifecycle for vm-launch."""

from __future__ import annotations

import signal
import subprocess
from typing import List, Optional

from vmlaunch.exceptions import LaunchError
from vmlaunch.models import EffectiveSettings
from vmlaunch.qemu import build_qemu_command, disk_image_command
from vmlaunch.session import SessionLog
from vmlaunch.utils import (
    ensure_directory,
    get_env_bool,
    kvm_available,
    log,
    run,
)

# Exit status a shell reports for a command it cannot find.
COMMAND_NOT_FOUND = 127


class Launcher:
    def __init__(self, settings: EffectiveSettings) -> None:
        self.settings = settings
        self.session = SessionLog(settings.log_path)
        self._kvm_available = kvm_available()
        self.command: Optional[List[str]] = None
        self.disk_created = False

    def prepare(self) -> None:
        if not self._kvm_available:
            if get_env_bool("REQUIRE_KVM", False):
                raise LaunchError(
                    "REQUIRE_KVM=1 is set but /dev/kvm is not available. "
                    "Load the kvm module, check permissions on /dev/kvm or unset REQUIRE_KVM."
                )
            log("WARN", "/dev/kvm not available; falling back to TCG (10-50x slower)")

        ensure_directory(self.settings.disk_path.parent)
        ensure_directory(self.settings.log_path.parent)
        self.disk_created = self._ensure_disk_image()
        self.command = build_qemu_command(self.settings, kvm=self._kvm_available)

    def _ensure_disk_image(self) -> bool:
        """Create the disk image once; an existing image is never touched."""
        disk = self.settings.disk_path
        if disk.exists():
            log("INFO", f"Using existing disk {disk}")
            return False
        log("INFO", f"Creating new disk: {disk} ({self.settings.disk_size})")
        try:
            result = run(disk_image_command(disk, self.settings.disk_size), check=False)
        except FileNotFoundError:
            raise LaunchError("qemu-img not found; install QEMU tools", exit_code=COMMAND_NOT_FOUND)
        if result.returncode != 0:
            raise LaunchError(
                f"qemu-img create failed for {disk} (exit {result.returncode})",
                exit_code=result.returncode,
            )
        log("SUCCESS", f"Created disk {disk}")
        return True

    def launch(self) -> int:
        if self.command is None:
            raise LaunchError("Launcher.prepare() must run before launch()")

        self.session.write_header(self.settings)
        if get_env_bool("DEBUG", False):
            print("QEMU Command:")
            print("\n".join(self.command))
            print(flush=True)

        log("INFO", "Launching VM...")
        log("INFO", f"Logs will be written to: {self.settings.log_path}")
        try:
            retcode = self._run_hypervisor(self.command)
        finally:
            self.session.write_footer()
        if retcode != 0:
            log("WARN", f"QEMU exited with status {retcode}")
        return retcode

    @staticmethod
    def _run_hypervisor(cmd: List[str]) -> int:
        log("DEBUG", f"Running: {' '.join(cmd)}")
        try:
            proc = subprocess.Popen(cmd)
        except FileNotFoundError:
            log("ERROR", f"{cmd[0]}: command not found")
            return COMMAND_NOT_FOUND

        def _terminate(signum, frame):
            proc.terminate()

        prev_sigterm = signal.signal(signal.SIGTERM, _terminate)
        try:
            retcode = proc.wait()
        except KeyboardInterrupt:
            proc.send_signal(signal.SIGINT)
            retcode = proc.wait()
        finally:
            signal.signal(signal.SIGTERM, prev_sigterm)

        if retcode < 0:
            # killed by signal N; report it like a shell does
            return 128 - retcode
        return retcode
