"""Allow running as python -m devglosario."""

from devglosario.cli import app

app()
