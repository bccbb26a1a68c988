"""
Registro fijo de nodos de almacenamiento.
"""
from pathlib import Path
from typing import Dict, List, Optional
import logging

from core.exceptions import InvalidNodeId

logger = logging.getLogger(__name__)


class Node:
    """Nodo de almacenamiento con su estado activo/caído."""

    def __init__(self, node_id: int, directory: Optional[Path] = None):
        self.node_id = node_id
        self.active = True
        self.directory = directory

    def fail(self):
        """Marca el nodo como caído."""
        self.active = False

    def recover(self):
        """Marca el nodo como activo."""
        self.active = True

    def to_dict(self) -> Dict:
        """Serializa a diccionario."""
        return {
            "node_id": self.node_id,
            "active": self.active,
            "directory": str(self.directory) if self.directory else None
        }

    def __repr__(self) -> str:
        state = "Active" if self.active else "Failed"
        return f"Node({self.node_id}, {state})"


class NodeRegistry:
    """
    Conjunto fijo de nodos 1..N.

    El ID de un nodo se corresponde con la posición id-1 de la lista
    interna; no hay altas ni bajas de nodos durante la vida del proceso.
    """

    def __init__(self, num_nodes: int, storage=None):
        """
        Inicializa el registro.

        Args:
            num_nodes: Número de nodos (N >= 1)
            storage: Almacén de bytes opcional; si se indica, se usa
                para resolver el directorio de cada nodo
        """
        if num_nodes < 1:
            raise ValueError(f"num_nodes debe ser >= 1 (recibido {num_nodes})")

        self._nodes: List[Node] = []
        for node_id in range(1, num_nodes + 1):
            directory = storage.node_path(node_id) if storage is not None else None
            self._nodes.append(Node(node_id, directory))

        logger.info(f"NodeRegistry: Inicializado con {num_nodes} nodos")

    def nodes(self) -> List[Node]:
        """Retorna los nodos en orden de ID."""
        return list(self._nodes)

    def count(self) -> int:
        """Retorna el número de nodos."""
        return len(self._nodes)

    def get(self, node_id: int) -> Node:
        """
        Obtiene un nodo por ID.

        Raises:
            InvalidNodeId: si el ID está fuera de [1, N]
        """
        if not isinstance(node_id, int) or isinstance(node_id, bool) \
                or node_id < 1 or node_id > len(self._nodes):
            raise InvalidNodeId(node_id, len(self._nodes))
        return self._nodes[node_id - 1]

    def exists(self, node_id: int) -> bool:
        """Verifica si el ID corresponde a un nodo."""
        try:
            self.get(node_id)
        except InvalidNodeId:
            return False
        return True

    def is_active(self, node_id: int) -> bool:
        """Verifica si un nodo está activo."""
        return self.get(node_id).active

    def set_active(self, node_id: int, active: bool):
        """
        Cambia el estado de un nodo.

        Args:
            node_id: ID del nodo
            active: True para recuperarlo, False para marcarlo caído
        """
        node = self.get(node_id)
        if active:
            node.recover()
            logger.info(f"NodeRegistry: Nodo {node_id} activo")
        else:
            node.fail()
            logger.warning(f"NodeRegistry: Nodo {node_id} caído")

    def fail(self, node_id: int):
        """Marca un nodo como caído."""
        self.set_active(node_id, False)

    def recover(self, node_id: int):
        """Recupera un nodo caído."""
        self.set_active(node_id, True)

    def active_ids(self) -> List[int]:
        """Retorna IDs de nodos activos, en orden."""
        return [node.node_id for node in self._nodes if node.active]

    def count_active(self, node_ids: List[int]) -> int:
        """
        Cuenta cuántos de los IDs dados corresponden a nodos activos.

        Args:
            node_ids: Lista de IDs (p. ej. el conjunto de réplicas de un archivo)

        Returns:
            Número de nodos activos
        """
        return sum(1 for node_id in node_ids if self.is_active(node_id))

    def to_dict(self) -> Dict:
        """Serializa a diccionario."""
        return {
            str(node.node_id): node.to_dict()
            for node in self._nodes
        }
