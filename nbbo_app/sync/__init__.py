"""
Stream synchronization module.

Merge-joins the NBBO snapshot stream with the filtered trade stream under a
lag, using symbol and time catch-up between two forward-only cursors.
"""

from .cursor import StreamCursor
from .synchronizer import StreamSynchronizer, SyncState, SyncStats

__all__ = ["StreamCursor", "StreamSynchronizer", "SyncState", "SyncStats"]
