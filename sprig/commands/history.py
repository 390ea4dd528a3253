"""
HistoryCommand — Read-only views over stored commits

log:        first-parent chain from HEAD back to the initial commit
global-log: every commit ever made, newest first
find:       ids of commits whose message matches exactly
"""

from ..commands.base import BaseCommand
from ..presentation.formatters import format_log


class HistoryCommand(BaseCommand):

    def log(self):
        self.emit(format_log(self.repo.log()))

    def global_log(self):
        self.emit(format_log(self.repo.global_log()))

    def find(self, message: str):
        for commit_id in self.repo.find_by_message(message):
            self.emit(commit_id)


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

COMMAND_NAMES = ['log', 'global-log', 'find']


def register_parser(subparsers):
    p1 = subparsers.add_parser('log', help='Show history of the current branch')
    p2 = subparsers.add_parser('global-log', help='Show every commit ever made')
    p3 = subparsers.add_parser('find', help='Print ids of commits with the given message')
    p3.add_argument('message', help='Exact commit message')
    return p1, p2, p3


def handle(cli, args):
    if args.command == 'log':
        cli._history_cmd.log()
    elif args.command == 'global-log':
        cli._history_cmd.global_log()
    elif args.command == 'find':
        cli._history_cmd.find(args.message)
