"""Console presentation shell."""

from bankomat.cli.console import ConsoleUI
from bankomat.cli.main import build_service, main

__all__ = ["ConsoleUI", "build_service", "main"]
