"""Allow running the CLI with `python -m forne`."""
from forne.cli import run

run()
