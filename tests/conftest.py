"""Shared test fixtures."""

from __future__ import annotations

import pytest

from vmlaunch.models import EffectiveSettings, Layout, VMConfig


@pytest.fixture
def layout(tmp_path) -> Layout:
    """Project layout rooted in a temporary directory."""
    return Layout(root=tmp_path)


@pytest.fixture
def words_file(tmp_path):
    path = tmp_path / "words"
    path.write_text("Aardvark\nO'Brien\n\nzebra\n")
    return path


@pytest.fixture
def vm_config(layout) -> VMConfig:
    """Return a standard VMConfig with all defaults filled in."""
    return VMConfig(
        prefix="win",
        vm_type="standard",
        source=layout.config_dir / "windows-standard.conf",
        default_memory="2048",
        default_cpus="2",
        default_disk_size="60G",
        default_iso=None,
        snapshot=False,
        network="user",
        display="gtk",
    )


@pytest.fixture
def settings(layout) -> EffectiveSettings:
    return EffectiveSettings(
        vm_name="win-base",
        vm_type="standard",
        memory_mb=4096,
        cpus=2,
        disk_size="60G",
        iso=None,
        snapshot=False,
        network="user",
        display="gtk",
        disk_path=layout.disk_dir / "win-base.qcow2",
        log_path=layout.log_dir / "win-base_20260101_120000.log",
        config_path=layout.config_dir / "windows-standard.conf",
        timestamp="20260101_120000",
    )


@pytest.fixture
def write_config(layout):
    """Write a config file into the layout's config directory."""

    def _write(name: str, text: str):
        layout.config_dir.mkdir(parents=True, exist_ok=True)
        path = layout.config_dir / name
        path.write_text(text)
        return path

    return _write


@pytest.fixture
def clean_env(monkeypatch):
    """Clear environment variables that change launch behaviour."""
    for key in ("DEBUG", "REQUIRE_KVM", "LOG_VERBOSE", "VM_ROOT"):
        monkeypatch.delenv(key, raising=False)
