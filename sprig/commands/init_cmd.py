"""
InitCommand — Create a new repository
"""

from typing import Optional

from ..commands.base import BaseCommand
from ..repository import Repository


class InitCommand(BaseCommand):
    """Creates .sprig/ with the initial commit on the default branch."""

    def init(self, branch: Optional[str] = None):
        branch = branch or self.config.core.default_branch
        repo = Repository.init(self.project_dir, default_branch=branch)
        self._cli.attach(repo)
        self.emit(f"Initialized empty Sprig repository in {repo.sprig_dir} (branch {branch})")


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

def register_parser(subparsers):
    p = subparsers.add_parser('init', help='Create a repository in the project directory')
    p.add_argument('--branch', '-b', default=None,
                   help='Name of the first branch (default: core.default_branch)')
    return p


def handle(cli, args):
    cli._init_cmd.init(branch=args.branch)
