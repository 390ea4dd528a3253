"""
Formatters — Render repository results as text

Pure functions: results in, strings out. Commands decide where to print.
"""

from datetime import datetime
from typing import Iterable, List

from ..core.merge import MergeOutcome, MergeResult
from ..core.objects import Commit
from ..repository import StatusReport
from .symbols import SymbolSet

SHORT_ID_LENGTH = 7


def format_date(iso_str: str) -> str:
    """
    Render a commit timestamp in local time.

    Example: "Thu Jan 1 00:00:00 1970 +0000"
    """
    try:
        if iso_str.endswith('Z'):
            iso_str = iso_str[:-1] + '+00:00'
        dt = datetime.fromisoformat(iso_str).astimezone()
    except ValueError:
        return iso_str
    return f"{dt:%a %b} {dt.day} {dt:%H:%M:%S %Y %z}"


def format_log_entry(commit: Commit) -> str:
    lines = ["===", f"commit {commit.id}"]
    if commit.is_merge:
        lines.append(
            f"Merge: {commit.parent[:SHORT_ID_LENGTH]} {commit.merge_parent[:SHORT_ID_LENGTH]}"
        )
    lines.append(f"Date: {format_date(commit.timestamp)}")
    lines.append(commit.message)
    lines.append("")
    return "\n".join(lines)


def format_log(commits: Iterable[Commit]) -> str:
    return "\n".join(format_log_entry(c) for c in commits)


def _section(title: str, entries: Iterable[str]) -> List[str]:
    return [f"=== {title} ===", *entries, ""]


def format_status(report: StatusReport, symbols: SymbolSet) -> str:
    branches = [
        f"{symbols.current_branch}{name}" if name == report.current_branch else name
        for name in report.branches
    ]
    lines: List[str] = []
    lines += _section("Branches", branches)
    lines += _section("Staged Files", report.staged)
    lines += _section("Removed Files", report.removed)
    lines += _section("Modifications Not Staged For Commit", [str(m) for m in report.modified])
    lines += _section("Untracked Files", report.untracked)
    return "\n".join(lines)


def format_merge(result: MergeResult, symbols: SymbolSet) -> str:
    if result.outcome is MergeOutcome.FAST_FORWARD:
        return "Current branch fast-forwarded."

    lines = []
    if result.has_conflict:
        lines.append("Encountered a merge conflict.")
        for path in result.conflicts:
            lines.append(f"  {symbols.check_warn} {path}")
    return "\n".join(lines)
