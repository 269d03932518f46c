"""Tests for vmlaunch.utils module."""

from __future__ import annotations

import re
from unittest.mock import patch

import pytest

from vmlaunch.exceptions import LaunchError
from vmlaunch.utils import (
    derive_vm_name,
    ensure_directory,
    get_env_bool,
    log,
    parse_memory_mb,
    parse_positive_int,
    random_word,
    session_timestamp,
    validate_disk_size,
)


class TestLog:
    def test_info_level(self, capsys):
        log("INFO", "test message")
        captured = capsys.readouterr()
        assert "[INFO]" in captured.out
        assert "test message" in captured.out

    def test_debug_suppressed_by_default(self, capsys):
        with patch("vmlaunch.utils._LOG_VERBOSE", False):
            log("DEBUG", "should not appear")
        assert capsys.readouterr().out == ""

    def test_debug_shown_when_verbose(self, capsys):
        with patch("vmlaunch.utils._LOG_VERBOSE", True):
            log("DEBUG", "visible")
        assert "visible" in capsys.readouterr().out


class TestGetEnvBool:
    @pytest.mark.parametrize("value", ["1", "true", "yes", "on", "TRUE"])
    def test_truthy_values(self, monkeypatch, value):
        monkeypatch.setenv("TEST_BOOL", value)
        assert get_env_bool("TEST_BOOL") is True

    @pytest.mark.parametrize("value", ["0", "false", "off", "random"])
    def test_falsy_values(self, monkeypatch, value):
        monkeypatch.setenv("TEST_BOOL", value)
        assert get_env_bool("TEST_BOOL") is False

    def test_default_when_unset(self, monkeypatch):
        monkeypatch.delenv("TEST_BOOL", raising=False)
        assert get_env_bool("TEST_BOOL", True) is True


class TestParsePositiveInt:
    def test_valid_value(self):
        assert parse_positive_int("Memory", "4096") == 4096

    def test_non_integer_raises(self):
        with pytest.raises(LaunchError, match="Memory must be an integer"):
            parse_positive_int("Memory", "4G")

    def test_zero_raises(self):
        with pytest.raises(LaunchError, match="CPUs must be >= 1"):
            parse_positive_int("CPUs", "0")


class TestParseMemoryMb:
    @pytest.mark.parametrize("raw, expected", [("4096", 4096), ("4096M", 4096), ("4G", 4096), ("2g", 2048)])
    def test_valid_values(self, raw, expected):
        assert parse_memory_mb(raw) == expected

    @pytest.mark.parametrize("raw", ["4GB", "four", "-1", "1T", ""])
    def test_invalid_values(self, raw):
        with pytest.raises(LaunchError, match="Memory must be a number of MB"):
            parse_memory_mb(raw)

    def test_zero_raises(self):
        with pytest.raises(LaunchError, match="Memory must be >= 1 MB"):
            parse_memory_mb("0G")


class TestValidateDiskSize:
    @pytest.mark.parametrize("size", ["10G", "500M", "1T", "100", "20g"])
    def test_valid_sizes(self, size):
        assert validate_disk_size(size) == size

    @pytest.mark.parametrize("size", ["abc", "", "-1G", "10X"])
    def test_invalid_sizes(self, size):
        with pytest.raises(LaunchError, match="Invalid disk size"):
            validate_disk_size(size)


class TestEnsureDirectory:
    def test_creates_nested_and_is_idempotent(self, tmp_path):
        target = tmp_path / "a" / "b"
        ensure_directory(target)
        ensure_directory(target)
        assert target.is_dir()


class TestSessionTimestamp:
    def test_format(self):
        assert re.match(r"^\d{8}_\d{6}$", session_timestamp())


class TestRandomWord:
    def test_word_is_lowercase_without_apostrophes(self, words_file):
        for _ in range(20):
            word = random_word(words_file)
            assert word in {"aardvark", "obrien", "zebra"}

    def test_missing_word_list_raises(self, tmp_path):
        with pytest.raises(LaunchError, match="-n/--name"):
            random_word(tmp_path / "missing")

    def test_empty_word_list_raises(self, tmp_path):
        empty = tmp_path / "words"
        empty.write_text("\n\n")
        with pytest.raises(LaunchError, match="is empty"):
            random_word(empty)


class TestDeriveVmName:
    def test_explicit_suffix(self, tmp_path):
        assert derive_vm_name("win", "base", tmp_path / "unused") == "win-base"

    def test_random_suffix(self, words_file):
        with patch("vmlaunch.utils.random.choice", return_value="zebra"):
            assert derive_vm_name("win", None, words_file) == "win-zebra"

    def test_blank_suffix_uses_random_word(self, words_file):
        name = derive_vm_name("linux", "  ", words_file)
        assert name.startswith("linux-")
        assert name != "linux-"
