"""Tests for Go package resolution and loading."""

from __future__ import annotations

import subprocess
from collections.abc import Callable
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from sqlprep.core.errors import ErrorCode, LoadError
from sqlprep.load.package import load_package, resolve_package_dir

WritePackage = Callable[..., Path]

STORE = 'package store\n\nconst q = "SELECT 1"\n'


def _completed(stdout: str = "", returncode: int = 0, stderr: str = "") -> MagicMock:
    result = MagicMock()
    result.returncode = returncode
    result.stdout = stdout
    result.stderr = stderr
    result.args = ["go", "list"]
    return result


class TestResolvePackageDir:
    """Tests for resolve_package_dir."""

    def test_directory_without_go_tool_falls_back_to_target(self, tmp_path: Path) -> None:
        directory, import_path = resolve_package_dir(str(tmp_path), "definitely-not-a-go-binary")

        assert directory == tmp_path.resolve()
        assert import_path == str(tmp_path)

    @patch("sqlprep.load.package.subprocess.run")
    def test_directory_uses_go_list_import_path(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = _completed("example.com/store\n")

        directory, import_path = resolve_package_dir(str(tmp_path))

        assert directory == tmp_path.resolve()
        assert import_path == "example.com/store"
        args, kwargs = mock_run.call_args
        assert args[0] == ["go", "list", "-f", "{{.ImportPath}}", "."]
        assert kwargs["cwd"] == str(tmp_path.resolve())

    @patch("sqlprep.load.package.subprocess.run")
    def test_import_path_resolved_with_go_list(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = _completed(f"{tmp_path}\n")

        directory, import_path = resolve_package_dir("example.com/store")

        assert directory == tmp_path.resolve()
        assert import_path == "example.com/store"
        assert mock_run.call_args.args[0] == [
            "go",
            "list",
            "-find",
            "-f",
            "{{.Dir}}",
            "example.com/store",
        ]

    @patch("sqlprep.load.package.subprocess.run")
    def test_unknown_import_path_raises(self, mock_run: MagicMock) -> None:
        mock_run.return_value = _completed(
            returncode=1, stderr="cannot find package example.com/missing"
        )

        with pytest.raises(LoadError) as exc_info:
            resolve_package_dir("example.com/missing")

        assert exc_info.value.code == ErrorCode.LOAD_PACKAGE_NOT_FOUND
        assert "cannot find package" in exc_info.value.message

    @patch("sqlprep.load.package.subprocess.run")
    def test_go_list_timeout_raises(self, mock_run: MagicMock) -> None:
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="go list", timeout=60)

        with pytest.raises(LoadError):
            resolve_package_dir("example.com/slow")

    def test_import_path_without_go_tool_raises(self) -> None:
        with pytest.raises(LoadError) as exc_info:
            resolve_package_dir("example.com/store", "definitely-not-a-go-binary")

        assert exc_info.value.code == ErrorCode.LOAD_PACKAGE_NOT_FOUND


class TestLoadPackage:
    """Tests for load_package."""

    def test_files_sorted_and_package_named(self, write_package: WritePackage) -> None:
        directory = write_package(
            {
                "z.go": STORE,
                "a.go": "package store\n",
                "README.md": "not go",
            }
        )

        package = load_package(directory, "example.com/store")

        assert package.name == "store"
        assert package.import_path == "example.com/store"
        assert package.directory == directory
        assert [f.name for f in package.files] == ["a.go", "z.go"]

    def test_import_path_defaults_to_directory(self, write_package: WritePackage) -> None:
        directory = write_package({"store.go": STORE})
        assert load_package(directory).import_path == str(directory)

    def test_internal_tests_included_external_excluded(self, write_package: WritePackage) -> None:
        directory = write_package(
            {
                "store.go": STORE,
                "store_test.go": "package store\n",
                "api_test.go": "package store_test\n",
            }
        )

        package = load_package(directory)

        assert [f.name for f in package.files] == ["store.go", "store_test.go"]
        assert package.files[1].is_test is True

    def test_tests_excluded_when_disabled(self, write_package: WritePackage) -> None:
        directory = write_package({"store.go": STORE, "store_test.go": "package store\n"})

        package = load_package(directory, include_tests=False)

        assert [f.name for f in package.files] == ["store.go"]

    def test_test_only_directory(self, write_package: WritePackage) -> None:
        directory = write_package(
            {"a_test.go": "package store\n", "b_test.go": "package store_test\n"}
        )

        package = load_package(directory)

        assert package.name == "store"
        assert [f.name for f in package.files] == ["a_test.go"]

    def test_no_go_files_raises(self, write_package: WritePackage) -> None:
        directory = write_package({"README.md": "empty"})

        with pytest.raises(LoadError) as exc_info:
            load_package(directory)

        assert exc_info.value.code == ErrorCode.LOAD_NO_SOURCE_FILES

    def test_multiple_packages_raise(self, write_package: WritePackage) -> None:
        directory = write_package({"a.go": "package a\n", "b.go": "package b\n"})

        with pytest.raises(LoadError) as exc_info:
            load_package(directory)

        assert exc_info.value.code == ErrorCode.LOAD_MULTIPLE_PACKAGES
        assert exc_info.value.details["packages"] == ["a", "b"]

    def test_syntax_error_raises(self, write_package: WritePackage) -> None:
        directory = write_package({"broken.go": "package store\n\nfunc broken( {\n"})

        with pytest.raises(LoadError) as exc_info:
            load_package(directory)

        assert exc_info.value.code == ErrorCode.LOAD_PARSE_ERROR
        assert exc_info.value.details["path"].endswith("broken.go")

    def test_oversize_file_skipped(self, write_package: WritePackage) -> None:
        huge = "package store\n\n// " + "x" * (1024 * 1024 + 16) + "\n"
        directory = write_package({"huge.go": huge, "store.go": STORE})

        package = load_package(directory, max_file_size_mb=1)

        assert [f.name for f in package.files] == ["store.go"]
