"""
ResetCommand — Move the current branch to an arbitrary commit
"""

from ..commands.base import BaseCommand


class ResetCommand(BaseCommand):

    def reset(self, commit_prefix: str):
        self.repo.reset(commit_prefix)


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

def register_parser(subparsers):
    p = subparsers.add_parser('reset', help='Check out a commit and move the current branch to it')
    p.add_argument('commit', help='Commit id or unique prefix')
    return p


def handle(cli, args):
    cli._reset_cmd.reset(args.commit)
