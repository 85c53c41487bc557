"""Emission of the generated prepared statements file."""

from sqlprep.emit.codegen import generate_code, unique_strings, write_code

__all__ = ["generate_code", "unique_strings", "write_code"]
