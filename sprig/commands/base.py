"""
BaseCommand — Shared foundation for all CLI commands

Commands receive the CLI instance and access its resources through
properties instead of building their own.
"""

from pathlib import Path
from typing import TYPE_CHECKING

from ..presentation.symbols import safe_print

if TYPE_CHECKING:
    from ..cli import SprigCLI


class BaseCommand:
    """Base class for CLI commands with access to shared resources."""

    def __init__(self, cli: 'SprigCLI'):
        self._cli = cli

    # -------------------------------------------------------------------------
    # Resources
    # -------------------------------------------------------------------------

    @property
    def project_dir(self) -> Path:
        """Directory the command was invoked against (-C)."""
        return self._cli.project_dir

    @property
    def repo(self):
        """Repository handle, opened on first use."""
        return self._cli.repo

    @property
    def config(self):
        """Application configuration."""
        return self._cli.config

    @property
    def symbols(self):
        """Symbol set for display (Unicode/ASCII)."""
        return self._cli.symbols

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def user_path(self, path: str) -> str:
        """Interpret a path argument relative to the invocation directory."""
        p = Path(path)
        if not p.is_absolute():
            p = self.project_dir / p
        return str(p)

    def emit(self, text: str) -> None:
        if text:
            safe_print(text)
