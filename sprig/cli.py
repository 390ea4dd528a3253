"""
CLI -- Command interface

Quiet on success, one line on failure. The core never prints; this
layer turns results into text and SprigError into an exit status.
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from .config import ConfigManager
from .core.errors import SprigError
from .presentation.symbols import get_symbols, safe_print
from .repository import Repository, find_root
from .commands.init_cmd import InitCommand
from .commands.staging import StagingCommand
from .commands.commit import CommitCommand
from .commands.restore import RestoreCommand
from .commands.history import HistoryCommand
from .commands.status import StatusCommand
from .commands.branch import BranchCommand
from .commands.reset import ResetCommand
from .commands.merge_cmd import MergeCommand
from .commands.config_cmd import ConfigCommand
from . import __version__

logger = logging.getLogger(__name__)


class SprigCLI:
    """Command-line interface for the Sprig version-control tool."""

    def __init__(self, project_dir: Path):
        self.project_dir = Path(project_dir).resolve()

        # Settings live with the enclosing repository when there is one
        self.root = find_root(self.project_dir) or self.project_dir
        self.config_manager = ConfigManager(self.root)
        self.config = self.config_manager.load()
        self.symbols = get_symbols(self.config.display.symbols)

        self._repo: Optional[Repository] = None

        self._init_cmd = InitCommand(self)
        self._staging_cmd = StagingCommand(self)
        self._commit_cmd = CommitCommand(self)
        self._restore_cmd = RestoreCommand(self)
        self._history_cmd = HistoryCommand(self)
        self._status_cmd = StatusCommand(self)
        self._branch_cmd = BranchCommand(self)
        self._reset_cmd = ResetCommand(self)
        self._merge_cmd = MergeCommand(self)
        self._config_cmd = ConfigCommand(self)

    @property
    def repo(self) -> Repository:
        """Open the repository lazily so init and config work without one."""
        if self._repo is None:
            self._repo = Repository(self.root)
        return self._repo

    def attach(self, repo: Repository) -> None:
        self._repo = repo
        self.root = repo.root


def configure_logging(level: str, verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level.upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sprig",
        description="Sprig -- a small content-addressed version-control system",
    )

    parser.add_argument(
        '--project', '-C',
        default=os.environ.get("SPRIG_PROJECT_PATH", "."),
        help='Run as if started in this directory (default: SPRIG_PROJECT_PATH or current)'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Log repository operations to stderr'
    )

    parser.add_argument(
        '--version', '-V',
        action='version',
        version=f'sprig {__version__}'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Register all commands from command modules (self-registration pattern)
    from .commands import register_all
    register_all(subparsers)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the Sprig CLI.

    Returns the process exit status: 0 on success, 1 when the operation
    failed, 2 for usage errors.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 2

    from .commands import dispatch

    try:
        cli = SprigCLI(Path(args.project))
        configure_logging(cli.config.log.level, args.verbose)
        status = dispatch(args.command, cli, args)
    except SprigError as e:
        logger.debug("%s failed: %s", args.command, e.kind)
        safe_print(str(e))
        return 1
    except KeyError as e:
        safe_print(f"Error: {e}")
        parser.print_help()
        return 2

    return status or 0


if __name__ == '__main__':
    sys.exit(main())
