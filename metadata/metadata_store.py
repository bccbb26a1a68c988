"""
Almacén de metadatos: nombre de archivo -> conjunto ordenado de réplicas.
"""
import logging
from typing import Dict, List, Optional, Tuple

from storage.persistence import MetadataPersistence

logger = logging.getLogger(__name__)


class MetadataStore:
    """
    Mapa nombre -> réplicas con persistencia tras cada mutación.

    El orden de cada lista de réplicas es el historial de asignación:
    primero el orden de subida, luego los nodos añadidos al re-replicar.
    """

    def __init__(
        self,
        persistence: Optional[MetadataPersistence] = None,
        node_count: Optional[int] = None
    ):
        """
        Inicializa el almacén y carga el estado previo.

        Args:
            persistence: Gestor de persistencia (None = solo memoria)
            node_count: Si se indica, los IDs fuera de [1, node_count]
                cargados de disco se descartan
        """
        self.persistence = persistence
        self.node_count = node_count
        self._entries: Dict[str, List[int]] = {}

        if persistence is not None:
            self._load()

    def _load(self):
        for filename, node_ids in self.persistence.load().items():
            if self.node_count is not None:
                valid = [n for n in node_ids if 1 <= n <= self.node_count]
                if len(valid) != len(node_ids):
                    logger.warning(
                        f"MetadataStore: '{filename}' referencia nodos inexistentes "
                        f"{sorted(set(node_ids) - set(valid))}, descartados"
                    )
                node_ids = valid
            if node_ids:
                self._entries[filename] = node_ids

        if self._entries:
            logger.info(f"MetadataStore: {len(self._entries)} archivos cargados")

    def save(self) -> bool:
        """
        Persiste el mapa completo.

        Returns:
            True si se guardó (o no hay persistencia configurada)
        """
        if self.persistence is None:
            return True
        return self.persistence.save(self._entries)

    def get(self, filename: str) -> Optional[List[int]]:
        """Retorna una copia de las réplicas de un archivo."""
        node_ids = self._entries.get(filename)
        return list(node_ids) if node_ids is not None else None

    def exists(self, filename: str) -> bool:
        """Verifica si un archivo está registrado."""
        return filename in self._entries

    def put(self, filename: str, node_ids: List[int]):
        """
        Registra (o reemplaza) las réplicas de un archivo.

        Raises:
            ValueError: si la lista está vacía o tiene IDs repetidos
        """
        if not node_ids:
            raise ValueError(f"'{filename}' necesita al menos una réplica")
        if len(set(node_ids)) != len(node_ids):
            raise ValueError(f"IDs de réplica repetidos para '{filename}': {node_ids}")
        self._entries[filename] = list(node_ids)

    def append_replica(self, filename: str, node_id: int):
        """Añade un nodo al final del conjunto de réplicas."""
        node_ids = self._entries[filename]
        if node_id in node_ids:
            raise ValueError(f"Nodo {node_id} ya es réplica de '{filename}'")
        node_ids.append(node_id)

    def remove(self, filename: str) -> bool:
        """Elimina la entrada de un archivo."""
        if filename in self._entries:
            del self._entries[filename]
            return True
        return False

    def items(self) -> List[Tuple[str, List[int]]]:
        """Instantánea (nombre, réplicas) ordenada por nombre."""
        return [
            (filename, list(node_ids))
            for filename, node_ids in sorted(self._entries.items())
        ]

    def count(self) -> int:
        """Retorna el número de archivos registrados."""
        return len(self._entries)

    def to_dict(self) -> Dict[str, List[int]]:
        """Serializa a diccionario."""
        return {filename: list(node_ids) for filename, node_ids in self._entries.items()}
