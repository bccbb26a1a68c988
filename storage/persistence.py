"""
Persistencia del mapa de metadatos en disco.

Formato: un registro por línea, ``nombre:id1,id2,...,idk``.
"""
import logging
from pathlib import Path
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


def encode_record(filename: str, node_ids: List[int]) -> str:
    """Codifica una entrada del mapa como línea de texto."""
    return f"{filename}:{','.join(str(node_id) for node_id in node_ids)}"


def decode_record(line: str) -> Optional[tuple]:
    """
    Decodifica una línea del archivo de metadatos.

    Tolera una coma final tras el último ID y
    descarta IDs repetidos conservando la primera aparición.

    Args:
        line: Línea sin salto de línea

    Returns:
        (filename, node_ids) o None si la línea está vacía o malformada
    """
    if not line.strip():
        return None

    filename, sep, ids_part = line.partition(":")
    if not sep or not filename:
        return None

    node_ids: List[int] = []
    for token in ids_part.split(","):
        token = token.strip()
        if not token:
            continue
        try:
            node_id = int(token)
        except ValueError:
            return None
        if node_id < 1:
            return None
        if node_id not in node_ids:
            node_ids.append(node_id)

    if not node_ids:
        return None

    return filename, node_ids


class MetadataPersistence:
    """Gestiona carga y guardado del mapa nombre -> réplicas."""

    def __init__(self, filepath: str = "metadata.txt"):
        """
        Args:
            filepath: Ruta del archivo de metadatos
        """
        self.filepath = Path(filepath)

    def save(self, metadata: Dict[str, List[int]]) -> bool:
        """
        Guarda el mapa completo.

        Un fallo se registra como advertencia; el estado en memoria
        sigue siendo la fuente de verdad.

        Returns:
            True si se guardó exitosamente
        """
        lines = [
            encode_record(filename, node_ids)
            for filename, node_ids in sorted(metadata.items())
        ]
        try:
            self.filepath.parent.mkdir(parents=True, exist_ok=True)
            with open(self.filepath, 'w', encoding='utf-8') as f:
                for line in lines:
                    f.write(line + "\n")
        except OSError as e:
            logger.warning(f"Error guardando metadatos en {self.filepath}: {e}")
            return False

        logger.debug(f"Metadatos guardados: {self.filepath} ({len(lines)} archivos)")
        return True

    def load(self) -> Dict[str, List[int]]:
        """
        Carga el mapa desde disco.

        Returns:
            Mapa cargado o diccionario vacío si no hay estado previo
        """
        metadata: Dict[str, List[int]] = {}

        if not self.filepath.exists():
            logger.debug(f"Archivo no existe: {self.filepath}")
            return metadata

        try:
            with open(self.filepath, 'r', encoding='utf-8') as f:
                for line_number, raw in enumerate(f, start=1):
                    line = raw.rstrip("\r\n")
                    record = decode_record(line)
                    if record is None:
                        if line.strip():
                            logger.warning(
                                f"{self.filepath}:{line_number}: línea malformada ignorada"
                            )
                        continue
                    filename, node_ids = record
                    metadata[filename] = node_ids
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Error cargando metadatos de {self.filepath}: {e}")
            return {}

        logger.info(f"Metadatos cargados: {self.filepath} ({len(metadata)} archivos)")
        return metadata
