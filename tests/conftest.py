"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import logging
import sys
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
import structlog

# Insert local src directory at the beginning of sys.path
# This ensures that the local sqlprep package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of sqlprep modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("sqlprep"):
        del sys.modules[module_name]

from sqlprep.load.package import GoPackage, load_package  # noqa: E402


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Drop handlers bound to streams captured by a previous test."""
    yield
    logging.getLogger().handlers.clear()
    structlog.reset_defaults()


@pytest.fixture
def write_package(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing Go files into a package directory under tmp_path."""

    def _write(files: dict[str, str], dirname: str = "store") -> Path:
        pkg_dir = tmp_path / dirname
        pkg_dir.mkdir(parents=True, exist_ok=True)
        for filename, content in files.items():
            (pkg_dir / filename).write_text(content)
        return pkg_dir

    return _write


@pytest.fixture
def load_go(write_package: Callable[..., Path]) -> Callable[..., GoPackage]:
    """Factory writing Go files and loading them as a package."""

    def _load(files: dict[str, str], **kwargs: object) -> GoPackage:
        return load_package(write_package(files), "example.com/store", **kwargs)  # type: ignore[arg-type]

    return _load
