"""
Re-replicación de archivos para restaurar el factor de replicación.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

import metrics
from cluster.node_registry import NodeRegistry
from config import REPLICATION_FACTOR
from core.exceptions import ReplicationFailed, StorageFault
from metadata.metadata_store import MetadataStore
from storage.node_storage import NodeStorage

logger = logging.getLogger(__name__)


@dataclass
class RepairReport:
    """Resultado de la re-replicación de un archivo."""
    filename: str
    source_node: Optional[int] = None
    restored: List[int] = field(default_factory=list)  # Fase A
    added: List[int] = field(default_factory=list)  # Fase B
    replica_count: int = 0
    target_reached: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.restored or self.added)


class Healer:
    """
    Restaura las réplicas de un archivo copiando desde una réplica viva.

    Algoritmo:
    1. Si el archivo ya tiene k réplicas activas, no hacer nada
    2. Elegir como origen la primera réplica activa
    3. Fase A: pre-copiar a las réplicas caídas del conjunto
    4. Fase B: si falta, copiar a nodos activos nuevos y añadirlos
    5. Persistir metadatos (aunque no se alcance k)
    """

    def __init__(
        self,
        registry: NodeRegistry,
        metadata: MetadataStore,
        storage: NodeStorage,
        replication_factor: int = REPLICATION_FACTOR
    ):
        self.registry = registry
        self.metadata = metadata
        self.storage = storage
        self.replication_factor = replication_factor

    def repair(self, filename: str) -> RepairReport:
        """
        Re-replica un archivo.

        Args:
            filename: Nombre del archivo

        Returns:
            Informe con los nodos restaurados y añadidos

        Raises:
            ReplicationFailed: si falla una copia; el progreso previo
                se conserva y se persiste
        """
        report = RepairReport(filename=filename)

        replicas = self.metadata.get(filename)
        if replicas is None:
            return report

        active_replicas = self.registry.count_active(replicas)
        report.replica_count = active_replicas
        if active_replicas >= self.replication_factor:
            report.target_reached = True
            return report

        source_id = next(
            (node_id for node_id in replicas if self.registry.is_active(node_id)),
            None
        )
        if source_id is None:
            logger.warning(f"Healer: '{filename}' sin réplicas activas, no se puede re-replicar")
            return report
        report.source_node = source_id

        try:
            # Fase A: el contador sube aunque el destino siga caído
            for node_id in replicas:
                if active_replicas >= self.replication_factor:
                    break
                if self.registry.is_active(node_id):
                    continue
                self._copy(source_id, node_id, filename)
                active_replicas += 1
                report.restored.append(node_id)
                metrics.rereplication_copies.labels(phase="restore").inc()
                logger.info(f"RE-REPLICATED: '{filename}' restaurado en nodo {node_id}")

            # Fase B
            if active_replicas < self.replication_factor:
                for node in self.registry.nodes():
                    if active_replicas >= self.replication_factor:
                        break
                    if not node.active or node.node_id in replicas:
                        continue
                    self._copy(source_id, node.node_id, filename)
                    self.metadata.append_replica(filename, node.node_id)
                    replicas.append(node.node_id)
                    active_replicas += 1
                    report.added.append(node.node_id)
                    metrics.rereplication_copies.labels(phase="expand").inc()
                    logger.info(f"RE-REPLICATED: '{filename}' añadido a nodo {node.node_id}")
        finally:
            report.replica_count = active_replicas
            report.target_reached = active_replicas >= self.replication_factor
            if not self.metadata.save():
                metrics.persist_failures.inc()

        if not report.target_reached:
            logger.warning(
                f"Healer: '{filename}' quedó con {active_replicas}/"
                f"{self.replication_factor} réplicas"
            )
        return report

    def _copy(self, source_id: int, target_id: int, filename: str):
        try:
            self.storage.copy(source_id, target_id, filename)
        except StorageFault as e:
            logger.error(f"Error re-replicando '{filename}' a nodo {target_id}: {e}")
            raise ReplicationFailed(filename, e.reason, target_id) from e
