"""Entry point for ``python -m sqlprep``."""

from sqlprep.cli.main import cli

if __name__ == "__main__":
    cli()
