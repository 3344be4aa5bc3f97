from __future__ import annotations

from ..models.reconcile_result import FileReconcileResult, ReconcileStats

"""Result line rendering.

Summary body (the SUMMARY label is added by the log formatter):
updated={u} removed={r} added={a} elapsed_sec={s}[ output={file}]
"""

__all__ = [
    "format_seconds",
    "render_summary",
    "render_success_message",
]


def format_seconds(seconds: float) -> str:
    """Integer values without decimals, tiny values without scientific notation."""
    if seconds == 0:
        return "0"
    if seconds == int(seconds):
        return str(int(seconds))
    if seconds < 0.01:
        return f"{seconds:.6f}".rstrip("0").rstrip(".")
    return f"{seconds:.3f}".rstrip("0").rstrip(".")


def render_summary(result: FileReconcileResult) -> str:
    """Render the summary body for a completed run, to be passed to ``log_summary``.

    Examples:
        >>> r = FileReconcileResult("a.xlsx", "b.xlsx", 2.0, stats=ReconcileStats(3, 1, 2))
        >>> render_summary(r)
        'updated=3 removed=1 added=2 elapsed_sec=2'
    """
    stats = result.stats or ReconcileStats()
    line = (
        f"updated={stats.updated} "
        f"removed={stats.removed} "
        f"added={stats.added} "
        f"elapsed_sec={format_seconds(result.elapsed_seconds)}"
    )
    if result.output_path is not None:
        line += f" output={result.output_path.name}"
    return line


def render_success_message(stats: ReconcileStats) -> str:
    """User facing one-liner, e.g. 'Updated 3 records successfully (removed 1, added 2)'."""
    return f"Updated {stats.updated} records successfully (removed {stats.removed}, added {stats.added})"
