"""
Motor de replicación: subida, descarga y borrado de archivos replicados.
"""
import logging
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import List, Optional, Tuple

import metrics
from cluster.node_registry import NodeRegistry
from config import REPLICATION_FACTOR
from core.exceptions import (
    AllReplicasUnavailable,
    DeletionFailed,
    InsufficientReplicas,
    InvalidFilename,
    NotFound,
    ReplicationFailed,
    SourceNotFound,
    StorageFault,
)
from metadata.metadata_store import MetadataStore
from replication.placement import select_for_upload
from storage.node_storage import NodeStorage

logger = logging.getLogger(__name__)


@dataclass
class DownloadResult:
    """Resultado de una descarga."""
    filename: str
    node_id: int
    content: bytes
    destination: Optional[Path] = None


def validate_filename(filename: str):
    """
    Verifica que un nombre se pueda guardar en un nodo y en los metadatos.

    Raises:
        InvalidFilename: si el nombre no es representable
    """
    if not filename or not filename.strip():
        raise InvalidFilename(filename, "nombre vacío")
    if ":" in filename:
        raise InvalidFilename(filename, "no puede contener ':'")
    if "\n" in filename or "\r" in filename:
        raise InvalidFilename(filename, "no puede contener saltos de línea")
    path = PurePath(filename)
    if path.is_absolute() or ".." in path.parts:
        raise InvalidFilename(filename, "la ruta sale del directorio del nodo")
    # Un nombre no normalizado apuntaría al archivo de otra entrada
    if path.as_posix() != filename or "." in filename.split("/"):
        raise InvalidFilename(filename, "la ruta no está normalizada")


class ReplicationEngine:
    """Orquesta subida, descarga y borrado sobre el conjunto de nodos."""

    def __init__(
        self,
        registry: NodeRegistry,
        metadata: MetadataStore,
        storage: NodeStorage,
        replication_factor: int = REPLICATION_FACTOR
    ):
        """
        Inicializa el motor.

        Args:
            registry: Registro de nodos
            metadata: Almacén de metadatos
            storage: Almacén de bytes por nodo
            replication_factor: Réplicas por archivo (k)
        """
        self.registry = registry
        self.metadata = metadata
        self.storage = storage
        self.replication_factor = replication_factor

        logger.info(f"ReplicationEngine: k={self.replication_factor}")

    def _persist(self):
        if not self.metadata.save():
            metrics.persist_failures.inc()

    @metrics.track_operation("upload")
    def upload(self, filename: str, source: Optional[str] = None) -> List[int]:
        """
        Sube un archivo y lo replica en k nodos.

        Una re-subida reemplaza la entrada anterior; las copias viejas
        en nodos no seleccionados quedan huérfanas en disco.

        Args:
            filename: Nombre con el que se registra el archivo
            source: Ruta local del contenido (por defecto, filename)

        Returns:
            Lista de nodos réplica

        Raises:
            InvalidFilename, SourceNotFound, InsufficientReplicas,
            ReplicationFailed
        """
        validate_filename(filename)

        source_path = Path(source if source is not None else filename)
        if not source_path.is_file():
            raise SourceNotFound(str(source_path))

        targets = select_for_upload(self.registry, self.replication_factor)
        if len(targets) < self.replication_factor:
            raise InsufficientReplicas(filename, len(targets), self.replication_factor)

        try:
            content = source_path.read_bytes()
        except OSError as e:
            raise ReplicationFailed(filename, f"no se pudo leer {source_path}: {e}") from e

        # Sin rollback: las copias parciales quedan en disco
        for node_id in targets:
            try:
                self.storage.put(node_id, filename, content)
            except StorageFault as e:
                logger.error(f"Error replicando '{filename}' a nodo {node_id}: {e}")
                raise ReplicationFailed(filename, e.reason, node_id) from e

        self.metadata.put(filename, targets)
        self._persist()

        logger.info(f"Archivo '{filename}' replicado a nodos {targets}")
        return targets

    @metrics.track_operation("download")
    def download(self, filename: str, destination: Optional[str] = None) -> DownloadResult:
        """
        Descarga un archivo desde la primera réplica activa.

        Si la copia desde ese nodo falla, la operación falla: no se
        intenta con las demás réplicas.

        Args:
            filename: Nombre del archivo
            destination: Ruta local donde escribir el contenido (opcional)

        Raises:
            NotFound, AllReplicasUnavailable, ReplicationFailed
        """
        replicas = self.metadata.get(filename)
        if replicas is None:
            raise NotFound(filename)

        for node_id in replicas:
            if not self.registry.is_active(node_id):
                continue

            try:
                content = self.storage.get(node_id, filename)
            except StorageFault as e:
                logger.error(f"Error descargando '{filename}' de nodo {node_id}: {e}")
                raise ReplicationFailed(filename, e.reason, node_id) from e

            target = None
            if destination is not None:
                target = Path(destination)
                try:
                    target.write_bytes(content)
                except OSError as e:
                    raise ReplicationFailed(filename, f"no se pudo escribir {target}: {e}", node_id) from e

            logger.info(f"Archivo '{filename}' descargado de nodo {node_id}")
            return DownloadResult(filename, node_id, content, target)

        raise AllReplicasUnavailable(filename, replicas)

    @metrics.track_operation("delete")
    def delete(self, filename: str) -> List[int]:
        """
        Elimina un archivo de todos sus nodos réplica.

        Un fallo aborta la operación sin tocar los metadatos; los
        borrados ya hechos no se compensan.

        Returns:
            Nodos de los que se eliminó el archivo

        Raises:
            NotFound, DeletionFailed
        """
        replicas = self.metadata.get(filename)
        if replicas is None:
            raise NotFound(filename)

        for node_id in replicas:
            try:
                self.storage.remove(node_id, filename)
            except StorageFault as e:
                logger.error(f"Error eliminando '{filename}' de nodo {node_id}: {e}")
                raise DeletionFailed(filename, e.reason, node_id) from e

        self.metadata.remove(filename)
        self._persist()

        logger.info(f"Archivo '{filename}' eliminado del DFS")
        return replicas

    def list(self) -> List[Tuple[str, List[int]]]:
        """Lista los archivos con sus réplicas."""
        return self.metadata.items()
