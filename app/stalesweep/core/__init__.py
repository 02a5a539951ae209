"""Core cleanup engine for stalesweep.

Exports the traversal, matching, evaluation and reporting building
blocks used by the CLI.
"""

from stalesweep.core.age import is_older_than
from stalesweep.core.engine import CleanupEngine
from stalesweep.core.matcher import PathMatcher
from stalesweep.core.report import Report, ReportCollector
from stalesweep.core.trash import Send2TrashMover, TrashMover
from stalesweep.core.walker import TreeWalker

__all__ = [
    "CleanupEngine",
    "PathMatcher",
    "Report",
    "ReportCollector",
    "Send2TrashMover",
    "TrashMover",
    "TreeWalker",
    "is_older_than",
]
