"""
Tests para la consola interactiva.
"""
import io
import os

import pytest

from simulator import Shell, parse_args


@pytest.fixture
def shell(dfs, temp_storage_dir, monkeypatch):
    """Consola con el directorio de trabajo en el directorio temporal."""
    monkeypatch.chdir(temp_storage_dir)
    with open("a.txt", "wb") as f:
        f.write(b"hola")
    return Shell(dfs, out=io.StringIO())


def run(shell, *lines):
    for line in lines:
        shell.execute(line)
    return shell.out.getvalue()


def test_upload_and_list(shell):
    output = run(shell, "upload a.txt", "list")

    assert "[UPLOAD SUCCESS] Archivo replicado en nodos: 1 2 3" in output
    assert " - a.txt → Nodos: 1 2 3" in output


def test_list_empty(shell):
    assert "(Vacío) No hay archivos almacenados." in run(shell, "list")


def test_download_writes_prefixed_file(shell):
    output = run(shell, "upload a.txt", "download a.txt")

    assert "[DOWNLOAD SUCCESS] Archivo descargado del nodo 1" in output
    with open("downloaded_a.txt", "rb") as f:
        assert f.read() == b"hola"


def test_delete(shell):
    output = run(shell, "upload a.txt", "delete a.txt", "delete a.txt")

    assert "[DELETE SUCCESS]" in output
    assert "Error: Archivo no encontrado en el DFS: a.txt" in output


def test_errors_are_reported_not_raised(shell):
    output = run(shell, "upload no_existe.txt", "download no_existe.txt")

    assert "Error: Archivo origen no encontrado" in output
    assert "Error: Archivo no encontrado en el DFS" in output


def test_fail_triggers_health_check(shell):
    output = run(shell, "upload a.txt", "fail 1", "fail 2", "nodes")

    assert "[NODE FAILED] Nodo 1 inactivo." in output
    assert output.count("WARNING:") == 1
    assert "solo 1 réplicas activas" in output
    assert "RE-REPLICATED: 'a.txt' restaurado en nodo 1." in output
    assert "RE-REPLICATED: 'a.txt' restaurado en nodo 2." in output
    assert "Nodo 1: Failed" in output
    assert "Nodo 3: Active" in output


def test_recover(shell):
    output = run(shell, "fail 4", "recover 4", "nodes")

    assert "[NODE RECOVERED] Nodo 4 activo." in output
    assert "Nodo 4: Active" in output


@pytest.mark.parametrize("line,expected", [
    ("fail", "Uso: fail <node_id>"),
    ("recover", "Uso: recover <node_id>"),
    ("fail x", "Error: ID de nodo inválido 'x'."),
    ("fail 9", "Error: ID de nodo inválido 9"),
    ("upload", "Uso: upload <filename>"),
    ("download", "Uso: download <filename>"),
    ("delete", "Uso: delete <filename>"),
    ("formatear", "Comando inválido"),
])
def test_usage_and_invalid_input(shell, line, expected):
    assert expected in run(shell, line)


def test_exit_stops_loop(shell):
    assert shell.execute("exit") is False
    assert shell.execute("") is True


def test_run_reads_until_exit(shell):
    shell.run(io.StringIO("upload a.txt\nexit\nlist\n"))

    output = shell.out.getvalue()
    assert "=== DISTRIBUTED FILE SYSTEM ===" in output
    assert "[UPLOAD SUCCESS]" in output
    assert "ARCHIVOS EN EL DFS" not in output


def test_status_and_metrics(shell):
    output = run(shell, "upload a.txt", "status", "metrics")

    assert '"a.txt": [' in output
    assert "replicafs_operations_total" in output


def test_check_when_healthy(shell):
    output = run(shell, "upload a.txt", "check")

    assert "Todos los archivos tienen réplicas suficientes." in output


def test_parse_args_defaults():
    args = parse_args([])

    assert args.nodes == 4
    assert args.replication == 3
    assert args.metadata_file == "metadata.txt"


def test_parse_args_overrides(temp_storage_dir):
    args = parse_args(["--nodes", "6", "--data-dir", temp_storage_dir])

    assert args.nodes == 6
    assert os.path.isdir(args.data_dir)
