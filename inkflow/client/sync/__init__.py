from inkflow.client.sync.buffer import EditBuffer
from inkflow.client.sync.controller import SyncController, SyncState, SyncStatus
from inkflow.client.sync.store import EntityCollectionStore

__all__ = [
    "EditBuffer",
    "EntityCollectionStore",
    "SyncController",
    "SyncState",
    "SyncStatus",
]
