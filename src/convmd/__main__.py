"""Allow ``python -m convmd``."""

from convmd.cli.main import app

app()
