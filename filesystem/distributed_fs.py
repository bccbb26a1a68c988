"""
Sistema de archivos distribuido replicado.

Este módulo orquesta todos los componentes:
- NodeRegistry: Nodos y su estado activo/caído
- NodeStorage: Bytes de cada réplica en el directorio del nodo
- MetadataStore: Archivo -> nodos réplica, persistido en disco
- ReplicationEngine: Subida, descarga y borrado
- HealthMonitor + Healer: Chequeo tras cada fallo/recuperación y re-replicación
"""
import logging
from typing import List, Optional, Tuple

import metrics
from cluster.node_registry import NodeRegistry
from config import (
    NUM_NODES,
    REPLICATION_FACTOR,
    MIN_SAFE_REPLICAS,
    STORAGE_BASE_PATH,
    METADATA_FILE,
)
from metadata.metadata_store import MetadataStore
from replication.healer import Healer
from replication.health_monitor import FileHealth, HealthMonitor
from replication.replication_engine import DownloadResult, ReplicationEngine
from storage.node_storage import NodeStorage
from storage.persistence import MetadataPersistence

logger = logging.getLogger(__name__)


class DistributedFileSystem:
    """
    Fachada del sistema - Clase orquestadora.

    Ejemplo de uso:
        dfs = DistributedFileSystem(num_nodes=4, base_path="data")

        dfs.upload("a.txt")             # -> [1, 2, 3]
        dfs.fail_node(1)                # chequeo de salud inmediato
        dfs.download("a.txt", "copia.txt")
        dfs.recover_node(1)
    """

    def __init__(
        self,
        num_nodes: int = NUM_NODES,
        base_path: str = STORAGE_BASE_PATH,
        metadata_file: Optional[str] = METADATA_FILE,
        replication_factor: int = REPLICATION_FACTOR,
        min_safe_replicas: int = MIN_SAFE_REPLICAS,
        storage: Optional[NodeStorage] = None
    ):
        """
        Inicializa el sistema y carga los metadatos previos.

        Args:
            num_nodes: Número de nodos
            base_path: Directorio base de los nodos
            metadata_file: Archivo de metadatos (None = solo memoria)
            replication_factor: Réplicas por archivo (k)
            min_safe_replicas: Umbral del chequeo de salud
            storage: Almacén de bytes (None = directorios bajo base_path)
        """
        self.storage = storage or NodeStorage(base_path)
        self.registry = NodeRegistry(num_nodes, self.storage)
        self.storage.prepare([node.node_id for node in self.registry.nodes()])

        persistence = MetadataPersistence(metadata_file) if metadata_file else None
        self.metadata = MetadataStore(persistence, node_count=num_nodes)

        self.engine = ReplicationEngine(
            self.registry, self.metadata, self.storage, replication_factor
        )
        self.healer = Healer(
            self.registry, self.metadata, self.storage, replication_factor
        )
        self.monitor = HealthMonitor(
            self.registry, self.metadata, self.healer, min_safe_replicas
        )

        metrics.active_nodes.set(num_nodes)
        logger.info(f"[DFS] Inicializado con {num_nodes} nodos")

    def upload(self, filename: str, source: Optional[str] = None) -> List[int]:
        return self.engine.upload(filename, source)

    def download(self, filename: str, destination: Optional[str] = None) -> DownloadResult:
        return self.engine.download(filename, destination)

    def delete(self, filename: str) -> List[int]:
        return self.engine.delete(filename)

    def list_files(self) -> List[Tuple[str, List[int]]]:
        return self.engine.list()

    def nodes(self):
        return self.registry.nodes()

    def fail_node(self, node_id: int) -> List[FileHealth]:
        """
        Marca un nodo como caído y ejecuta el chequeo de salud.

        Returns:
            Resultado del chequeo

        Raises:
            InvalidNodeId: si el ID no existe
        """
        self.registry.fail(node_id)
        return self.monitor.check_all()

    def recover_node(self, node_id: int) -> List[FileHealth]:
        """
        Recupera un nodo y ejecuta el chequeo de salud.

        Raises:
            InvalidNodeId: si el ID no existe
        """
        self.registry.recover(node_id)
        return self.monitor.check_all()

    def check_health(self) -> List[FileHealth]:
        """Ejecuta un chequeo de salud manual."""
        return self.monitor.check_all()
