"""stalesweep - move files older than a cutoff to the trash.

Walks one or more directory trees, selects files whose timestamps are
older than a cutoff instant and moves them to the platform trash,
optionally removing directories left empty afterwards.
"""

__version__ = "0.3.0"
