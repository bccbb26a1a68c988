"""
Utilidades comunes para ReplicaFS.
"""
import json
import logging
import sys
from typing import Any, Dict, List, Optional, Tuple


def setup_logging(level: str = "INFO", log_file: Optional[str] = None):
    """
    Configura logging con soporte UTF-8.

    Args:
        level: Nivel de logging (DEBUG, INFO, WARNING, ERROR)
        log_file: Archivo de log adicional (opcional)
    """
    handler = logging.StreamHandler(sys.stdout)

    # Intentar configurar UTF-8; si el stream no lo permite se usa el de defecto
    if hasattr(handler.stream, 'reconfigure'):
        try:
            handler.stream.reconfigure(encoding='utf-8', errors='replace')
        except (ValueError, OSError):
            pass

    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def format_replicas(node_ids: List[int]) -> str:
    """Formatea una lista de réplicas como '1 2 3'."""
    return " ".join(str(node_id) for node_id in node_ids)


def format_file_list(entries: List[Tuple[str, List[int]]]) -> str:
    """
    Formatea el listado de archivos del DFS.

    Args:
        entries: Lista de (nombre, réplicas)

    Returns:
        Texto listo para imprimir
    """
    if not entries:
        return "(Vacío) No hay archivos almacenados."

    lines = ["ARCHIVOS EN EL DFS:"]
    for filename, node_ids in entries:
        lines.append(f" - {filename} → Nodos: {format_replicas(node_ids)}")
    return "\n".join(lines)


def format_node_status(nodes) -> str:
    """Formatea el estado de los nodos."""
    lines = ["ESTADO DE NODOS:"]
    for node in nodes:
        lines.append(f"Nodo {node.node_id}: {'Active' if node.active else 'Failed'}")
    return "\n".join(lines)


def pretty_print_json(data: Dict[str, Any]) -> str:
    """
    Formatea JSON para impresión legible.

    Args:
        data: Diccionario a formatear

    Returns:
        String JSON formateado
    """
    return json.dumps(data, indent=2, ensure_ascii=False)
