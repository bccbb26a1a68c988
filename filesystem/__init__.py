"""
Paquete filesystem - Sistema de archivos distribuido replicado.

Exporta la clase principal DistributedFileSystem que combina registro
de nodos, metadatos, motor de replicación y chequeo de salud.
"""

from filesystem.distributed_fs import DistributedFileSystem

__all__ = ['DistributedFileSystem']
