"""
Almacén de bytes por nodo.
Cada nodo guarda sus réplicas en un directorio propio (node_<id>).
"""
import logging
import shutil
from pathlib import Path
from typing import List

from config import NODE_DIR_PREFIX
from core.exceptions import StorageFault

logger = logging.getLogger(__name__)


class NodeStorage:
    """
    Primitiva de almacenamiento: poner, leer y eliminar bytes de un
    archivo en un nodo. Cada llamada es síncrona y todo-o-nada.
    """

    def __init__(self, base_path: str = "."):
        """
        Args:
            base_path: Directorio base bajo el que se crean los nodos
        """
        self.base_path = Path(base_path)

    def node_path(self, node_id: int) -> Path:
        """Directorio de almacenamiento de un nodo."""
        return self.base_path / f"{NODE_DIR_PREFIX}{node_id}"

    def file_path(self, node_id: int, filename: str) -> Path:
        """Ruta de la réplica de un archivo en un nodo."""
        return self.node_path(node_id) / filename

    def prepare(self, node_ids: List[int]):
        """
        Crea los directorios de los nodos que no existan.

        Args:
            node_ids: IDs de nodos
        """
        for node_id in node_ids:
            path = self.node_path(node_id)
            try:
                path.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise StorageFault(node_id, str(path), str(e)) from e

    def put(self, node_id: int, filename: str, data: bytes):
        """
        Escribe el contenido de un archivo en un nodo (sobrescribe).

        Raises:
            StorageFault: si la escritura falla
        """
        path = self.file_path(node_id, filename)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise StorageFault(node_id, filename, str(e)) from e
        logger.debug(f"Nodo {node_id}: escrito '{filename}' ({len(data)} bytes)")

    def get(self, node_id: int, filename: str) -> bytes:
        """
        Lee el contenido de un archivo en un nodo.

        Raises:
            StorageFault: si la réplica no existe o no se puede leer
        """
        path = self.file_path(node_id, filename)
        try:
            return path.read_bytes()
        except OSError as e:
            raise StorageFault(node_id, filename, str(e)) from e

    def remove(self, node_id: int, filename: str) -> bool:
        """
        Elimina la réplica de un archivo en un nodo.

        Returns:
            True si existía, False si no había nada que eliminar

        Raises:
            StorageFault: si la eliminación falla
        """
        path = self.file_path(node_id, filename)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageFault(node_id, filename, str(e)) from e
        logger.debug(f"Nodo {node_id}: eliminado '{filename}'")
        return True

    def copy(self, source_id: int, target_id: int, filename: str):
        """
        Copia la réplica de un archivo de un nodo a otro.

        Raises:
            StorageFault: si la lectura del origen o la escritura del
                destino fallan
        """
        source = self.file_path(source_id, filename)
        target = self.file_path(target_id, filename)
        if not source.is_file():
            raise StorageFault(source_id, filename, "réplica origen inexistente")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, target)
        except OSError as e:
            raise StorageFault(target_id, filename, str(e)) from e
        logger.debug(f"Copiado '{filename}' de nodo {source_id} a nodo {target_id}")

    def exists(self, node_id: int, filename: str) -> bool:
        """Verifica si un nodo guarda una réplica del archivo."""
        return self.file_path(node_id, filename).is_file()
