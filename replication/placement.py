"""
Política de colocación de réplicas para archivos nuevos.
"""
from typing import List

from cluster.node_registry import NodeRegistry


def select_for_upload(registry: NodeRegistry, replication_factor: int) -> List[int]:
    """
    Selecciona nodos réplica para una subida.

    Estrategia: recorrer los nodos en orden de ID y tomar los primeros
    ``replication_factor`` activos. Sin aleatoriedad ni balanceo de carga,
    para que la colocación sea reproducible.

    Args:
        registry: Registro de nodos
        replication_factor: Número de réplicas deseadas

    Returns:
        Lista de node_ids (puede tener menos de replication_factor
        elementos si no hay suficientes nodos activos)
    """
    selected: List[int] = []
    for node in registry.nodes():
        if len(selected) >= replication_factor:
            break
        if node.active:
            selected.append(node.node_id)
    return selected
