"""
RestoreCommand — Bring back one file from a commit

Accepted forms:
    sprig restore [--] <path>            version in the current commit
    sprig restore <commit> -- <path>     version in an older commit
"""

from typing import List, Optional, Tuple

from ..commands.base import BaseCommand
from ..core.errors import IncorrectOperands


def parse_operands(operands: List[str]) -> Tuple[Optional[str], str]:
    """Split restore operands into (commit prefix or None, path)."""
    # argparse may or may not leave the separator in place
    values = [v for v in operands if v != '--']
    if len(values) == 1:
        return None, values[0]
    if len(values) == 2:
        return values[0], values[1]
    raise IncorrectOperands()


class RestoreCommand(BaseCommand):

    def restore(self, operands: List[str]):
        commit_prefix, path = parse_operands(operands)
        self.repo.restore(self.user_path(path), commit_prefix)


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

def register_parser(subparsers):
    p = subparsers.add_parser('restore', help='Restore a file from HEAD or a given commit')
    p.add_argument('operands', nargs='+', metavar='[COMMIT --] PATH',
                   help='File to restore, optionally preceded by a commit id and --')
    return p


def handle(cli, args):
    cli._restore_cmd.restore(args.operands)
