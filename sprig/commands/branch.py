"""
BranchCommand — Create, delete and switch branches
"""

from typing import Optional

from ..commands.base import BaseCommand


class BranchCommand(BaseCommand):

    def branch(self, name: Optional[str] = None):
        """Create a branch at HEAD, or list branches when no name is given."""
        if name is None:
            current = self.repo.current_branch
            for branch in self.repo.refs.branches():
                marker = self.symbols.current_branch if branch == current else ' '
                self.emit(f"{marker} {branch}")
            return
        self.repo.branch(name)

    def rm_branch(self, name: str):
        self.repo.rm_branch(name)

    def switch(self, name: str):
        self.repo.switch(name)


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

COMMAND_NAMES = ['branch', 'rm-branch', 'switch']


def register_parser(subparsers):
    p1 = subparsers.add_parser('branch', help='Create a branch at the current commit')
    p1.add_argument('name', nargs='?', default=None, help='Branch name (omit to list)')

    p2 = subparsers.add_parser('rm-branch', help='Delete a branch pointer')
    p2.add_argument('name', help='Branch to delete')

    p3 = subparsers.add_parser('switch', help='Check out the tip of a branch')
    p3.add_argument('name', help='Branch to switch to')

    return p1, p2, p3


def handle(cli, args):
    if args.command == 'branch':
        cli._branch_cmd.branch(args.name)
    elif args.command == 'rm-branch':
        cli._branch_cmd.rm_branch(args.name)
    elif args.command == 'switch':
        cli._branch_cmd.switch(args.name)
