"""
Excepciones de ReplicaFS.
Cada error es local a la operación invocada: se reporta al llamador
y nunca aborta el proceso.
"""
from typing import Any, Dict, List, Optional


class ReplicaFSError(Exception):
    """
    Excepción base de todos los errores de ReplicaFS.
    """

    def __init__(
        self,
        message: str,
        code: str = "REPLICAFS_ERROR",
        details: Optional[List[Dict[str, Any]]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or []
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Serializa el error a diccionario."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details
        }


# Errores de nodos

class InvalidNodeId(ReplicaFSError):
    """ID de nodo fuera del rango [1, N]."""

    def __init__(self, node_id: Any, node_count: int):
        super().__init__(
            message=f"ID de nodo inválido {node_id} (válidos: 1..{node_count})",
            code="INVALID_NODE_ID",
            details=[{"field": "node_id", "value": node_id}]
        )
        self.node_id = node_id


# Errores de archivos

class InvalidFilename(ReplicaFSError):
    """Nombre de archivo que no se puede registrar en los metadatos."""

    def __init__(self, filename: str, reason: str):
        super().__init__(
            message=f"Nombre de archivo inválido '{filename}': {reason}",
            code="INVALID_FILENAME",
            details=[{"field": "filename", "value": filename}]
        )
        self.filename = filename


class SourceNotFound(ReplicaFSError):
    """El archivo origen de una subida no existe."""

    def __init__(self, source: str):
        super().__init__(
            message=f"Archivo origen no encontrado: {source}",
            code="SOURCE_NOT_FOUND",
            details=[{"field": "source", "value": source}]
        )
        self.source = source


class NotFound(ReplicaFSError):
    """El archivo no está registrado en los metadatos."""

    def __init__(self, filename: str):
        super().__init__(
            message=f"Archivo no encontrado en el DFS: {filename}",
            code="FILE_NOT_FOUND",
            details=[{"field": "filename", "value": filename}]
        )
        self.filename = filename


# Errores de replicación

class InsufficientReplicas(ReplicaFSError):
    """No hay suficientes nodos activos para alcanzar el factor de replicación."""

    def __init__(self, filename: str, available: int, required: int):
        super().__init__(
            message=(
                f"Nodos activos insuficientes para '{filename}': "
                f"{available}/{required} réplicas"
            ),
            code="INSUFFICIENT_REPLICAS",
            details=[
                {"field": "available", "value": available},
                {"field": "required", "value": required}
            ]
        )
        self.filename = filename
        self.available = available
        self.required = required


class AllReplicasUnavailable(ReplicaFSError):
    """Ninguno de los nodos réplica de un archivo está activo."""

    def __init__(self, filename: str, replicas: List[int]):
        super().__init__(
            message=(
                f"Todas las réplicas de '{filename}' están caídas "
                f"(nodos {replicas})"
            ),
            code="ALL_REPLICAS_UNAVAILABLE",
            details=[{"field": "replicas", "value": list(replicas)}]
        )
        self.filename = filename


class ReplicationFailed(ReplicaFSError):
    """Fallo de almacenamiento al copiar un archivo entre nodos."""

    def __init__(self, filename: str, reason: str, node_id: Optional[int] = None):
        super().__init__(
            message=f"Error replicando '{filename}': {reason}",
            code="REPLICATION_FAILED",
            details=[{"field": "node_id", "value": node_id}]
        )
        self.filename = filename
        self.node_id = node_id


class DeletionFailed(ReplicaFSError):
    """Fallo de almacenamiento al eliminar un archivo de un nodo."""

    def __init__(self, filename: str, reason: str, node_id: Optional[int] = None):
        super().__init__(
            message=f"Error eliminando '{filename}': {reason}",
            code="DELETION_FAILED",
            details=[{"field": "node_id", "value": node_id}]
        )
        self.filename = filename
        self.node_id = node_id


# Errores de almacenamiento

class StorageFault(ReplicaFSError):
    """Fallo de la primitiva de almacenamiento de bytes."""

    def __init__(self, node_id: int, filename: str, reason: str):
        super().__init__(
            message=f"Fallo de almacenamiento en nodo {node_id} para '{filename}': {reason}",
            code="STORAGE_FAULT",
            details=[
                {"field": "node_id", "value": node_id},
                {"field": "filename", "value": filename}
            ]
        )
        self.node_id = node_id
        self.filename = filename
        self.reason = reason
