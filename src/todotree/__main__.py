"""Allow running as ``python -m todotree``."""

from todotree.cli.app import app

app()
