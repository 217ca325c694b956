"""
Pytest configuration and shared fixtures for slangkit tests.
"""

import io
import json
import os
import stat
import sys
import zipfile
from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that need a real slangc (SLANGC_BIN_PATH)",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (requires --integration)",
    )


# ============================================================================
# Shared Test Fixtures
# ============================================================================


def make_zip_entry(name: str, mode: int) -> zipfile.ZipInfo:
    """ZipInfo carrying Unix permission bits, as Slang's release zips do."""
    info = zipfile.ZipInfo(name)
    info.create_system = 3  # Unix
    file_type = stat.S_IFDIR if name.endswith("/") else stat.S_IFREG
    info.external_attr = (file_type | mode) << 16
    if name.endswith("/"):
        info.external_attr |= 0x10  # MS-DOS directory flag
    return info


def build_toolchain_zip(compiler_bytes: bytes = b"#!/bin/sh\necho slangc\n") -> bytes:
    """An in-memory archive shaped like a Slang release."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        zf.writestr(make_zip_entry("bin/", 0o755), b"")
        zf.writestr(make_zip_entry("bin/slangc", 0o755), compiler_bytes)
        zf.writestr(make_zip_entry("lib/libslang.so", 0o644), b"\x7fELF")
        zf.writestr(make_zip_entry("README.md", 0o644), b"# Slang\n")
    return buffer.getvalue()


@pytest.fixture
def toolchain_zip_bytes() -> bytes:
    return build_toolchain_zip()


@pytest.fixture
def release_payload():
    """A trimmed GitHub release listing with assets for every platform."""
    base = "https://github.com/shader-slang/slang/releases/download/v2025.1"
    names = [
        "slang-2025.1-source.zip",
        "slang-2025.1-linux-aarch64.zip",
        "slang-2025.1-linux-x86_64.tar.gz",
        "slang-2025.1-linux-x86_64.zip",
        "slang-2025.1-macos-aarch64.zip",
        "slang-2025.1-macos-x86_64.zip",
        "slang-2025.1-windows-aarch64.zip",
        "slang-2025.1-windows-x86_64.zip",
    ]
    return {
        "url": "https://api.github.com/repos/shader-slang/slang/releases/1",
        "tag_name": "v2025.1",
        "name": "v2025.1",
        "draft": False,
        "author": {"login": "slangbot", "id": 1},
        "assets": [
            {
                "id": index,
                "name": name,
                "content_type": "application/zip",
                "size": 1024,
                "browser_download_url": f"{base}/{name}",
                "uploader": {"login": "slangbot"},
            }
            for index, name in enumerate(names)
        ],
    }


@pytest.fixture
def release_body(release_payload) -> str:
    return json.dumps(release_payload)


@pytest.fixture
def fake_slangc(tmp_path) -> Path:
    """
    A stand-in slangc script.

    It echoes its argv to stdout; a file argument named 'missing.slang'
    makes it fail with a slangc-like diagnostic on stderr; '-help' prints
    usage to stderr.
    """
    if os.name == "nt":
        pytest.skip("fake slangc script needs a POSIX shebang")

    script = tmp_path / "bin" / "slangc"
    script.parent.mkdir(parents=True)
    script.write_text(
        f"#!{sys.executable}\n"
        "import sys\n"
        "args = sys.argv[1:]\n"
        "if args == ['-help']:\n"
        "    sys.stderr.write('Usage: slangc [options...] [--] <input files>\\n')\n"
        "    sys.stdout.write('ignored')\n"
        "    sys.exit(0)\n"
        "if args and args[-1].endswith('missing.slang'):\n"
        "    sys.stderr.write(args[-1] + '(0): error 1: cannot open file\\n')\n"
        "    sys.exit(1)\n"
        "sys.stdout.buffer.write(' '.join(args).encode('utf-8'))\n"
    )
    script.chmod(0o755)
    return script
