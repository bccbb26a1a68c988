"""
Simulador: consola interactiva del sistema de archivos distribuido.
"""
import argparse
import logging
import sys
from typing import Callable, Dict, List, Optional, TextIO

import config
from core.exceptions import ReplicaFSError
from filesystem.distributed_fs import DistributedFileSystem
from metrics import export_metrics
from replication.health_monitor import FileHealth
from utils import (
    format_file_list,
    format_node_status,
    format_replicas,
    pretty_print_json,
    setup_logging,
)

logger = logging.getLogger(__name__)

USAGE = (
    "Comandos: upload <file>, download <file>, delete <file>, list, "
    "fail <id>, recover <id>, nodes, status, check, metrics, help, exit"
)


class Shell:
    """Intérprete de comandos sobre un DistributedFileSystem."""

    def __init__(
        self,
        dfs: DistributedFileSystem,
        out: TextIO = sys.stdout,
        download_prefix: str = config.DOWNLOAD_PREFIX
    ):
        """
        Args:
            dfs: Sistema de archivos
            out: Stream de salida
            download_prefix: Prefijo del archivo local de cada descarga
        """
        self.dfs = dfs
        self.out = out
        self.download_prefix = download_prefix

        self.commands: Dict[str, Callable[[str], None]] = {
            "upload": self._upload,
            "download": self._download,
            "delete": self._delete,
            "list": self._list,
            "fail": self._fail,
            "recover": self._recover,
            "nodes": self._nodes,
            "status": self._status,
            "check": self._check,
            "metrics": self._metrics,
            "help": self._help,
        }

    def print(self, text: str = ""):
        self.out.write(text + "\n")

    def execute(self, line: str) -> bool:
        """
        Ejecuta una línea de comando.

        Returns:
            False si el comando fue 'exit', True en otro caso
        """
        line = line.strip()
        if not line:
            return True

        cmd, _, rest = line.partition(" ")
        if cmd == "exit":
            return False

        handler = self.commands.get(cmd)
        if handler is None:
            self.print("Comando inválido. Escribe 'help' para ver los comandos.")
            return True

        try:
            handler(rest.strip())
        except ReplicaFSError as e:
            self.print(f"Error: {e.message}")
        return True

    def run(self, stdin: TextIO = sys.stdin):
        """Bucle principal de la consola."""
        self.print("\n=== DISTRIBUTED FILE SYSTEM ===")
        self.print(USAGE + "\n")

        while True:
            self.out.write("DFS> ")
            self.out.flush()
            line = stdin.readline()
            if not line:
                break
            if not self.execute(line):
                break

    # Comandos

    def _upload(self, arg: str):
        if not arg:
            self.print("Uso: upload <filename>")
            return
        node_ids = self.dfs.upload(arg)
        self.print(f"[UPLOAD SUCCESS] Archivo replicado en nodos: {format_replicas(node_ids)}")

    def _download(self, arg: str):
        if not arg:
            self.print("Uso: download <filename>")
            return
        result = self.dfs.download(arg, self.download_prefix + arg.replace("/", "_"))
        self.print(
            f"[DOWNLOAD SUCCESS] Archivo descargado del nodo {result.node_id} "
            f"en {result.destination}"
        )

    def _delete(self, arg: str):
        if not arg:
            self.print("Uso: delete <filename>")
            return
        self.dfs.delete(arg)
        self.print("[DELETE SUCCESS] Archivo eliminado del DFS.")

    def _list(self, arg: str):
        self.print(format_file_list(self.dfs.list_files()))

    def _parse_node_id(self, arg: str, command: str) -> Optional[int]:
        parts = arg.split()
        if not parts:
            self.print(f"Uso: {command} <node_id>")
            return None
        try:
            return int(parts[0])
        except ValueError:
            self.print(f"Error: ID de nodo inválido '{parts[0]}'.")
            return None

    def _fail(self, arg: str):
        node_id = self._parse_node_id(arg, "fail")
        if node_id is None:
            return
        results = self.dfs.fail_node(node_id)
        self.print(f"[NODE FAILED] Nodo {node_id} inactivo.")
        self._report_health(results)

    def _recover(self, arg: str):
        node_id = self._parse_node_id(arg, "recover")
        if node_id is None:
            return
        results = self.dfs.recover_node(node_id)
        self.print(f"[NODE RECOVERED] Nodo {node_id} activo.")
        self._report_health(results)

    def _nodes(self, arg: str):
        self.print(format_node_status(self.dfs.nodes()))

    def _status(self, arg: str):
        self.print(pretty_print_json({
            "nodes": self.dfs.registry.to_dict(),
            "files": self.dfs.metadata.to_dict(),
        }))

    def _check(self, arg: str):
        results = self.dfs.check_health()
        if not any(health.at_risk for health in results):
            self.print("Todos los archivos tienen réplicas suficientes.")
        self._report_health(results)

    def _metrics(self, arg: str):
        self.print(export_metrics().decode("utf-8").rstrip())

    def _help(self, arg: str):
        self.print(USAGE)

    def _report_health(self, results: List[FileHealth]):
        for health in results:
            if not health.at_risk:
                continue
            self.print(
                f"WARNING: El archivo '{health.filename}' tiene solo "
                f"{health.active_replicas} réplicas activas. ¡Riesgo de pérdida de datos!"
            )
            if health.repair is not None:
                for node_id in health.repair.restored:
                    self.print(f"RE-REPLICATED: '{health.filename}' restaurado en nodo {node_id}.")
                for node_id in health.repair.added:
                    self.print(f"RE-REPLICATED: '{health.filename}' añadido al nodo {node_id}.")
            if health.error is not None:
                self.print(f"Error durante la re-replicación: {health.error}")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="ReplicaFS - sistema de archivos replicado")
    parser.add_argument("--nodes", type=int, default=config.NUM_NODES,
                        help="Número de nodos de almacenamiento")
    parser.add_argument("--replication", type=int, default=config.REPLICATION_FACTOR,
                        help="Factor de replicación")
    parser.add_argument("--data-dir", default=config.STORAGE_BASE_PATH,
                        help="Directorio base de los nodos")
    parser.add_argument("--metadata-file", default=config.METADATA_FILE,
                        help="Archivo de metadatos")
    parser.add_argument("--log-level", default=config.LOG_LEVEL)
    parser.add_argument("--log-file", default=config.LOG_FILE)
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level, args.log_file)

    dfs = DistributedFileSystem(
        num_nodes=args.nodes,
        base_path=args.data_dir,
        metadata_file=args.metadata_file,
        replication_factor=args.replication
    )
    logger.info(f"Consola iniciada (datos en {args.data_dir}, metadatos en {args.metadata_file})")
    Shell(dfs).run()
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nApagado limpio")
        sys.exit(0)
