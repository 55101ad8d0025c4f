"""Assessment state store and snapshot persistence.

This package contains:
- AssessmentStore: validated, observable session state
- SnapshotStorage: atomic, locked file storage for the snapshot
- DebouncedWriter: coalesces bursts of mutations into one write
"""

from venture_assessment.state.persistence import (DebouncedWriter,
                                                  SnapshotStorage,
                                                  encode_snapshot)
from venture_assessment.state.store import AssessmentStore

__all__ = [
    "AssessmentStore",
    "DebouncedWriter",
    "SnapshotStorage",
    "encode_snapshot",
]
