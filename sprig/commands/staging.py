"""
StagingCommand — Stage additions and removals for the next commit
"""

from ..commands.base import BaseCommand
from ..core.staging import RemoveOutcome, StageOutcome


class StagingCommand(BaseCommand):
    """add / rm: edit the staging index relative to HEAD."""

    def add(self, path: str):
        outcome = self.repo.add(self.user_path(path))
        if outcome is StageOutcome.UNCHANGED:
            self.emit(f"{path} matches the current commit; nothing staged.")
        elif outcome is StageOutcome.ALREADY_STAGED:
            self.emit(f"{path} is already staged.")

    def rm(self, path: str):
        outcome = self.repo.rm(self.user_path(path))
        if outcome is RemoveOutcome.ALREADY_REMOVED:
            self.emit(f"{path} is already staged for removal.")


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

COMMAND_NAMES = ['add', 'rm']


def register_parser(subparsers):
    p1 = subparsers.add_parser('add', help='Stage a file for the next commit')
    p1.add_argument('path', help='File to stage')

    p2 = subparsers.add_parser('rm', help='Unstage a file or stage it for removal')
    p2.add_argument('path', help='File to remove')

    return p1, p2


def handle(cli, args):
    if args.command == 'add':
        cli._staging_cmd.add(args.path)
    elif args.command == 'rm':
        cli._staging_cmd.rm(args.path)
