"""
MergeCommand — Merge a branch into the current one
"""

from ..commands.base import BaseCommand
from ..presentation.formatters import format_merge


class MergeCommand(BaseCommand):

    def merge(self, branch: str):
        result = self.repo.merge(branch)
        self.emit(format_merge(result, self.symbols))


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

def register_parser(subparsers):
    p = subparsers.add_parser('merge', help='Merge the given branch into the current branch')
    p.add_argument('branch', help='Branch to merge from')
    return p


def handle(cli, args):
    cli._merge_cmd.merge(args.branch)
