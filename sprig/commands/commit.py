"""
CommitCommand — Record the staged snapshot
"""

from ..commands.base import BaseCommand


class CommitCommand(BaseCommand):

    def commit(self, message: str):
        self.repo.commit(message)


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

def register_parser(subparsers):
    p = subparsers.add_parser('commit', help='Record staged changes')
    p.add_argument('message', nargs='?', default='', help='Commit message')
    return p


def handle(cli, args):
    cli._commit_cmd.commit(args.message)
