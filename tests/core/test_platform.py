"""
Unit tests for the platform module.

Tests cover:
- Target triple parsing for every supported OS/arch pair
- Rejection of unknown tokens and malformed triples
- Asset suffix and executable naming
- Host triple detection with mocking
"""

import pytest
from unittest.mock import patch

from slangkit.core.exceptions import ConfigurationError, UnsupportedPlatformError
from slangkit.core.platform import (
    SlangArch,
    SlangOs,
    SlangPlatform,
    clear_platform_cache,
    detect_host_platform,
    detect_host_triple,
    get_supported_platforms,
    parse_target_triple,
)


class TestParseTargetTriple:
    """Tests for parse_target_triple()."""

    @pytest.mark.parametrize(
        "triple,expected_suffix",
        [
            ("x86_64-unknown-linux-gnu", "linux-x86_64.zip"),
            ("aarch64-unknown-linux-gnu", "linux-aarch64.zip"),
            ("x86_64-unknown-linux-musl", "linux-x86_64.zip"),
            ("x86_64-pc-windows-msvc", "windows-x86_64.zip"),
            ("aarch64-pc-windows-msvc", "windows-aarch64.zip"),
            ("x86_64-apple-darwin", "macos-x86_64.zip"),
            ("aarch64-apple-darwin", "macos-aarch64.zip"),
            ("arm64-apple-darwin", "macos-aarch64.zip"),
        ],
    )
    def test_asset_suffix(self, triple, expected_suffix):
        """Test every recognized triple yields a deterministic suffix."""
        assert parse_target_triple(triple).asset_suffix() == expected_suffix

    def test_parses_components(self):
        """Test arch is component 0 and OS is component 2."""
        info = parse_target_triple("aarch64-apple-darwin")
        assert info.os is SlangOs.MACOS
        assert info.arch is SlangArch.AARCH64

    def test_unknown_arch(self):
        """Test unknown architecture is rejected."""
        with pytest.raises(UnsupportedPlatformError, match="Unknown arch: riscv64gc"):
            parse_target_triple("riscv64gc-unknown-linux-gnu")

    def test_unknown_os(self):
        """Test unknown OS is rejected."""
        with pytest.raises(UnsupportedPlatformError, match="Unknown OS: freebsd") as exc:
            parse_target_triple("x86_64-unknown-freebsd")
        assert exc.value.token == "freebsd"

    def test_os_must_be_third_component(self):
        """Test 'linux' in the vendor slot is not accepted as the OS."""
        with pytest.raises(UnsupportedPlatformError):
            parse_target_triple("x86_64-linux-android")

    @pytest.mark.parametrize("triple", ["", "x86_64", "x86_64-linux"])
    def test_malformed_triple(self, triple):
        """Test triples with fewer than three parts are rejected."""
        with pytest.raises(UnsupportedPlatformError, match="Malformed target triple"):
            parse_target_triple(triple)

    def test_is_configuration_error(self):
        """Test platform errors belong to the fatal configuration family."""
        with pytest.raises(ConfigurationError):
            parse_target_triple("i686-pc-windows-msvc")


class TestSlangPlatform:
    """Tests for SlangPlatform dataclass."""

    def test_platform_string(self):
        info = SlangPlatform(SlangOs.LINUX, SlangArch.X86_64)
        assert info.platform_string() == "linux-x86_64"
        assert str(info) == "linux-x86_64"

    def test_executable_name_windows(self):
        info = SlangPlatform(SlangOs.WINDOWS, SlangArch.X86_64)
        assert info.executable_name("slangc") == "slangc.exe"

    def test_executable_name_unix(self):
        info = SlangPlatform(SlangOs.MACOS, SlangArch.AARCH64)
        assert info.executable_name("slangc") == "slangc"

    def test_is_hashable(self):
        a = SlangPlatform(SlangOs.LINUX, SlangArch.AARCH64)
        b = parse_target_triple("aarch64-unknown-linux-gnu")
        assert a == b
        assert len({a, b}) == 1

    def test_supported_platforms(self):
        platforms = get_supported_platforms()
        assert len(platforms) == 6
        assert "windows-aarch64" in platforms
        assert "macos-x86_64" in platforms


class TestDetectHost:
    """Tests for host triple detection."""

    def setup_method(self):
        clear_platform_cache()

    def teardown_method(self):
        clear_platform_cache()

    @patch("slangkit.core.platform.platform.system", return_value="Linux")
    @patch("slangkit.core.platform.platform.machine", return_value="x86_64")
    def test_linux(self, mock_machine, mock_system):
        assert detect_host_triple() == "x86_64-unknown-linux-gnu"

    @patch("slangkit.core.platform.platform.system", return_value="Windows")
    @patch("slangkit.core.platform.platform.machine", return_value="AMD64")
    def test_windows_amd64_normalized(self, mock_machine, mock_system):
        assert detect_host_triple() == "x86_64-pc-windows-msvc"
        assert detect_host_platform().asset_suffix() == "windows-x86_64.zip"

    @patch("slangkit.core.platform.platform.system", return_value="Darwin")
    @patch("slangkit.core.platform.platform.machine", return_value="arm64")
    def test_macos_arm64(self, mock_machine, mock_system):
        assert detect_host_platform() == SlangPlatform(SlangOs.MACOS, SlangArch.AARCH64)

    @patch("slangkit.core.platform.platform.system", return_value="SunOS")
    @patch("slangkit.core.platform.platform.machine", return_value="x86_64")
    def test_unsupported_host(self, mock_machine, mock_system):
        with pytest.raises(UnsupportedPlatformError):
            detect_host_triple()

    @patch("slangkit.core.platform.platform.system", return_value="Linux")
    @patch("slangkit.core.platform.platform.machine", return_value="x86_64")
    def test_cached(self, mock_machine, mock_system):
        detect_host_triple()
        detect_host_triple()
        assert mock_system.call_count == 1
