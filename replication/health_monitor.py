"""
Chequeo de salud de réplicas tras cada cambio de estado de un nodo.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

import metrics
from cluster.node_registry import NodeRegistry
from config import MIN_SAFE_REPLICAS
from core.exceptions import ReplicationFailed
from metadata.metadata_store import MetadataStore
from replication.healer import Healer, RepairReport

logger = logging.getLogger(__name__)


@dataclass
class FileHealth:
    """Estado de un archivo en un chequeo."""
    filename: str
    active_replicas: int
    repair: Optional[RepairReport] = None
    error: Optional[str] = None

    @property
    def at_risk(self) -> bool:
        return self.repair is not None or self.error is not None


class HealthMonitor:
    """Detecta archivos con pocas réplicas activas y dispara la re-replicación."""

    def __init__(
        self,
        registry: NodeRegistry,
        metadata: MetadataStore,
        healer: Healer,
        min_safe_replicas: int = MIN_SAFE_REPLICAS
    ):
        """
        Args:
            registry: Registro de nodos
            metadata: Almacén de metadatos
            healer: Re-replicador
            min_safe_replicas: Umbral por debajo del cual se re-replica
        """
        self.registry = registry
        self.metadata = metadata
        self.healer = healer
        self.min_safe_replicas = min_safe_replicas

    def check_all(self) -> List[FileHealth]:
        """
        Revisa todos los archivos registrados.

        Un fallo al re-replicar un archivo se registra y el chequeo
        continúa con los demás.

        Returns:
            Estado de cada archivo revisado
        """
        results: List[FileHealth] = []
        at_risk = 0

        for filename, replicas in self.metadata.items():
            active_count = self.registry.count_active(replicas)
            health = FileHealth(filename=filename, active_replicas=active_count)
            results.append(health)

            if active_count >= self.min_safe_replicas:
                continue

            at_risk += 1
            logger.warning(
                f"WARNING: '{filename}' tiene solo {active_count} réplicas activas. "
                f"Riesgo de pérdida de datos"
            )

            try:
                health.repair = self.healer.repair(filename)
            except ReplicationFailed as e:
                health.error = e.message
                logger.error(f"HealthMonitor: re-replicación de '{filename}' falló: {e}")

        metrics.at_risk_files.set(at_risk)
        metrics.active_nodes.set(len(self.registry.active_ids()))
        return results
