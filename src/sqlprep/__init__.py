"""sqlprep - build-time extraction of SQL queries from Go packages.

Finds calls to query-executing methods (``ExecContext``, ``GetContext``, ...)
in a Go package, resolves their query argument from literals and constants,
and writes the sorted list into a generated Go file so the statements can be
prepared at startup.
"""

__version__ = "0.1.0"
