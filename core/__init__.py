"""
ReplicaFS Core - Excepciones compartidas por todos los módulos.
"""
from core.exceptions import (
    ReplicaFSError,
    InvalidNodeId,
    InvalidFilename,
    SourceNotFound,
    NotFound,
    InsufficientReplicas,
    AllReplicasUnavailable,
    ReplicationFailed,
    DeletionFailed,
    StorageFault,
)

__all__ = [
    "ReplicaFSError",
    "InvalidNodeId",
    "InvalidFilename",
    "SourceNotFound",
    "NotFound",
    "InsufficientReplicas",
    "AllReplicasUnavailable",
    "ReplicationFailed",
    "DeletionFailed",
    "StorageFault",
]
