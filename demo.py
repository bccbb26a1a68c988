"""
Script de demo rápido para probar el sistema.
"""
import sys
import tempfile
from pathlib import Path

from filesystem.distributed_fs import DistributedFileSystem
from utils import format_file_list, format_node_status, setup_logging


def quick_demo() -> int:
    """Demo rápida: fallo de dos nodos, re-replicación y recuperación."""
    print("="*70)
    print(" ReplicaFS - Sistema de archivos con triple replicación")
    print("="*70)

    with tempfile.TemporaryDirectory() as workdir:
        base = Path(workdir)

        print("\n[1/5] Creando sistema de 4 nodos...")
        dfs = DistributedFileSystem(
            num_nodes=4,
            base_path=str(base),
            metadata_file=str(base / "metadata.txt")
        )

        print("\n[2/5] Subiendo a.txt...")
        source = base / "a.txt"
        source.write_text("hola desde ReplicaFS\n", encoding="utf-8")
        replicas = dfs.upload("a.txt", str(source))
        print(f"  OK a.txt replicado en nodos {replicas}")

        print("\n[3/5] Fallando nodos 1 y 2...")
        for node_id in (1, 2):
            results = dfs.fail_node(node_id)
            for health in results:
                status = "EN RIESGO" if health.at_risk else "ok"
                print(f"  Nodo {node_id} caído: {health.filename} -> "
                      f"{health.active_replicas} réplicas activas ({status})")
                if health.repair is not None:
                    print(f"    Restaurado en nodos {health.repair.restored}, "
                          f"añadido a nodos {health.repair.added}")

        print("\n[4/5] Descargando a.txt...")
        result = dfs.download("a.txt", str(base / "downloaded_a.txt"))
        print(f"  OK descargado del nodo {result.node_id}: {result.content!r}")

        print("\n[5/5] Recuperando nodo 1...")
        dfs.recover_node(1)
        print(format_node_status(dfs.nodes()))
        print(format_file_list(dfs.list_files()))

    print("\n" + "="*70)
    print(" Demo completada")
    print("="*70)
    return 0


if __name__ == "__main__":
    setup_logging("WARNING")
    sys.exit(quick_demo())
