"""
Entry point for running dbmigrate as a module.

Enables execution via:
    python -m dbmigrate [command] [options]

This is equivalent to running the installed CLI:
    dbmigrate [command] [options]

Examples:
    python -m dbmigrate --help
    python -m dbmigrate migrate --config dbmigrate.yaml
    python -m dbmigrate status --format json
"""

from dbmigrate.cli import app

if __name__ == "__main__":
    app()
