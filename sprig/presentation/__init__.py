"""
Presentation — Display layer for Sprig

- Symbols: visual vocabulary (unicode/ascii) and encoding-safe printing
- Formatters: log, status and merge rendering
"""

from .symbols import SymbolSet, get_symbols, safe_print
from .formatters import format_date, format_log, format_log_entry, format_merge, format_status

__all__ = [
    "SymbolSet", "get_symbols", "safe_print",
    "format_date", "format_log", "format_log_entry", "format_merge", "format_status",
]
