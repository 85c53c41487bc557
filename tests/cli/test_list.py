"""Tests for sqlprep list command."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

from click.testing import CliRunner

from sqlprep.cli.main import cli

runner = CliRunner()

NO_GO_ENV = {"SQLPREP__LOADER__GO_BINARY": "definitely-not-a-go-binary"}

QUERIES_GO = """package store

const getUser = "SELECT * FROM users WHERE id = $1"

func (s *Store) Get(ctx context.Context, id int) error {
	return s.db.GetContext(ctx, &u, getUser, id)
}

func (s *Store) Delete(ctx context.Context, id int) error {
	_, err := s.db.ExecContext(ctx, `DELETE FROM users WHERE id = $1`, id)
	return err
}
"""

WritePackage = Callable[..., Path]


class TestListCommand:
    """Tests for list command."""

    def test_lists_queries_in_traversal_order(self, write_package: WritePackage) -> None:
        directory = write_package({"queries.go": QUERIES_GO})

        result = runner.invoke(cli, ["list", "-f", str(directory)], env=NO_GO_ENV)

        assert result.exit_code == 0, result.output
        lines = result.stdout.splitlines()
        assert len(lines) == 2
        assert lines[0].endswith('queries.go:6\tGetContext\t"SELECT * FROM users WHERE id = $1"')
        assert lines[1].endswith("queries.go:10\tExecContext\t`DELETE FROM users WHERE id = $1`")

    def test_json_output(self, write_package: WritePackage) -> None:
        directory = write_package({"queries.go": QUERIES_GO})

        result = runner.invoke(cli, ["list", "-f", str(directory), "--json"], env=NO_GO_ENV)

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert [(d["method"], d["line"]) for d in data] == [
            ("GetContext", 6),
            ("ExecContext", 10),
        ]
        assert data[0]["query"] == '"SELECT * FROM users WHERE id = $1"'
        assert data[0]["path"].endswith("queries.go")

    def test_duplicates_are_kept(self, write_package: WritePackage) -> None:
        directory = write_package(
            {
                "queries.go": """package store

func a() { db.ExecContext(ctx, "SELECT 1") }

func b() { db.QueryContext(ctx, "SELECT 1") }
"""
            }
        )

        result = runner.invoke(cli, ["list", "-f", str(directory), "--json"], env=NO_GO_ENV)

        assert result.exit_code == 0, result.output
        assert [d["query"] for d in json.loads(result.stdout)] == ['"SELECT 1"', '"SELECT 1"']

    def test_empty_package(self, write_package: WritePackage) -> None:
        directory = write_package({"store.go": "package store\n"})

        result = runner.invoke(cli, ["list", "-f", str(directory), "--json"], env=NO_GO_ENV)

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == []

    def test_no_go_files_fails(self, write_package: WritePackage) -> None:
        directory = write_package({"README.md": "nothing"})

        result = runner.invoke(cli, ["list", "-f", str(directory)], env=NO_GO_ENV)

        assert result.exit_code == 1
        assert "LOAD_NO_SOURCE_FILES" in result.output
