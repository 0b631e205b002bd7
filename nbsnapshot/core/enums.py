from enum import Enum


class WorkflowState(str, Enum):
    UNAUTHENTICATED = "UNAUTHENTICATED"
    AUTHENTICATED = "AUTHENTICATED"
    SNAPSHOT_LOCATING = "SNAPSHOT_LOCATING"
    SNAPSHOT_PENDING = "SNAPSHOT_PENDING"
    SNAPSHOT_READY = "SNAPSHOT_READY"
    DOWNLOADING = "DOWNLOADING"
    DONE = "DONE"
