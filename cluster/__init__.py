"""
Módulo de clúster.
Gestiona el conjunto fijo de nodos y su estado activo/caído.
"""
from cluster.node_registry import Node, NodeRegistry

__all__ = [
    "Node",
    "NodeRegistry",
]
