"""
Módulo de almacenamiento.
Gestiona los bytes de las réplicas en cada nodo y la persistencia de metadatos.
"""
from storage.node_storage import NodeStorage
from storage.persistence import MetadataPersistence, encode_record, decode_record

__all__ = [
    "NodeStorage",
    "MetadataPersistence",
    "encode_record",
    "decode_record",
]
