"""Allow ``python -m quickfind``."""

from quickfind.cli import app

app()
