"""Allow ``python -m plandoc``."""
from __future__ import annotations

from plandoc.cli.main import cli

if __name__ == "__main__":
    cli()
