"""
Módulo de metadatos.
Mapa de archivos a nodos réplica, persistido tras cada cambio.
"""
from metadata.metadata_store import MetadataStore

__all__ = [
    "MetadataStore",
]
