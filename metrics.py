"""
Métricas Prometheus para monitoreo.
"""
from prometheus_client import Counter, Gauge, generate_latest, REGISTRY
from functools import wraps
import logging

from core.exceptions import ReplicaFSError

logger = logging.getLogger(__name__)


# Definir métricas
operations = Counter(
    'replicafs_operations_total',
    'Operaciones del motor de replicación',
    ['operation', 'outcome']
)

rereplication_copies = Counter(
    'replicafs_rereplication_copies_total',
    'Copias realizadas al re-replicar',
    ['phase']
)

persist_failures = Counter(
    'replicafs_metadata_persist_failures_total',
    'Fallos al persistir metadatos'
)

active_nodes = Gauge(
    'replicafs_active_nodes',
    'Nodos activos'
)

at_risk_files = Gauge(
    'replicafs_at_risk_files',
    'Archivos con menos réplicas activas que el mínimo seguro'
)


def track_operation(operation: str):
    """Decorator que cuenta éxitos y errores de una operación."""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                result = func(*args, **kwargs)
            except ReplicaFSError as e:
                operations.labels(operation=operation, outcome=e.code.lower()).inc()
                raise
            operations.labels(operation=operation, outcome="ok").inc()
            return result
        return wrapper
    return decorator


def export_metrics() -> bytes:
    """Exporta métricas en formato Prometheus."""
    return generate_latest(REGISTRY)
