"""
StatusCommand — Branches, staged work and working-tree drift
"""

from ..commands.base import BaseCommand
from ..presentation.formatters import format_status


class StatusCommand(BaseCommand):

    def status(self):
        self.emit(format_status(self.repo.status(), self.symbols))


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

def register_parser(subparsers):
    return subparsers.add_parser('status', help='Show branches, staged files and changes')


def handle(cli, args):
    cli._status_cmd.status()
