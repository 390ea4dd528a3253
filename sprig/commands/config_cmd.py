"""
ConfigCommand — View and change settings

    sprig config                    show effective configuration
    sprig config KEY                print one value
    sprig config KEY VALUE [--user] set a value in project (or user) config
"""

from typing import Optional

from ..commands.base import BaseCommand


class ConfigCommand(BaseCommand):
    """Front end for ConfigManager."""

    def show_config(self):
        self.emit(self._cli.config_manager.display())

    def get_config(self, key: str) -> bool:
        value = self._cli.config_manager.get(key)
        if value is None:
            self.emit(f"Unknown setting: {key}")
            return False
        self.emit(str(value))
        return True

    def set_config(self, key: str, value: str, scope: str = "project") -> bool:
        manager = self._cli.config_manager
        error = manager.set(key, value, scope)
        if error:
            self.emit(f"Error: {error}")
            return False

        path = manager.project_config_path if scope == "project" else manager.user_config_path
        self.emit(f"{self.symbols.check_pass} Set {key} = {value} ({path})")
        return True


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

def register_parser(subparsers):
    p = subparsers.add_parser('config', help='View or set configuration')
    p.add_argument('key', nargs='?', default=None, help='Setting (e.g., log.level)')
    p.add_argument('value', nargs='?', default=None, help='New value')
    p.add_argument('--user', action='store_true',
                   help='Apply to user config instead of project')
    return p


def handle(cli, args) -> Optional[int]:
    if args.key is None:
        cli._config_cmd.show_config()
        return 0
    if args.value is None:
        ok = cli._config_cmd.get_config(args.key)
    else:
        scope = "user" if args.user else "project"
        ok = cli._config_cmd.set_config(args.key, args.value, scope)
    return 0 if ok else 1
