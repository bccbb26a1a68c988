"""
Módulo de replicación de archivos.
Gestiona colocación, subida/descarga/borrado, chequeo de salud y re-replicación.
"""
from replication.placement import select_for_upload
from replication.replication_engine import ReplicationEngine, DownloadResult
from replication.healer import Healer, RepairReport
from replication.health_monitor import HealthMonitor, FileHealth

__all__ = [
    "select_for_upload",
    "ReplicationEngine",
    "DownloadResult",
    "Healer",
    "RepairReport",
    "HealthMonitor",
    "FileHealth",
]
