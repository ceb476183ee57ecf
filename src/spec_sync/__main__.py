"""Allows `python -m spec_sync ...`."""

from spec_sync.cli.main import run

if __name__ == "__main__":
    run()
