"""
Tests para el chequeo de salud y la re-replicación.
"""
import logging

import pytest

from core.exceptions import InvalidNodeId, ReplicationFailed
from filesystem.distributed_fs import DistributedFileSystem


def _by_name(results):
    return {health.filename: health for health in results}


def test_two_failures_scenario(dfs, make_source, caplog):
    """
    Escenario: 4 nodos, a.txt en [1,2,3].
    fail 1 -> 2 réplicas activas, sin aviso.
    fail 2 -> 1 réplica activa, aviso y restauración en 1 y 2.
    recover 1 -> sin más acciones.
    """
    dfs.upload("a.txt", make_source("a.txt", b"datos"))

    with caplog.at_level(logging.WARNING):
        health = _by_name(dfs.fail_node(1))["a.txt"]
    assert health.active_replicas == 2
    assert not health.at_risk
    assert "Riesgo de pérdida" not in caplog.text

    caplog.clear()
    with caplog.at_level(logging.WARNING):
        health = _by_name(dfs.fail_node(2))["a.txt"]
    assert health.active_replicas == 1
    assert "Riesgo de pérdida" in caplog.text

    repair = health.repair
    assert repair.source_node == 3
    assert repair.restored == [1, 2]
    assert repair.added == []
    assert repair.replica_count == 3
    assert repair.target_reached
    assert dfs.list_files() == [("a.txt", [1, 2, 3])]
    # Pre-copiado aunque los nodos sigan caídos
    assert dfs.storage.get(1, "a.txt") == b"datos"
    assert not dfs.registry.is_active(1)

    health = _by_name(dfs.recover_node(1))["a.txt"]
    assert health.active_replicas == 2
    assert health.repair is None
    assert dfs.list_files() == [("a.txt", [1, 2, 3])]


def test_repair_is_idempotent_when_healthy(dfs, make_source, metadata_file, monkeypatch):
    dfs.upload("a.txt", make_source("a.txt"))
    with open(metadata_file, encoding="utf-8") as f:
        before = f.read()

    saves = []
    monkeypatch.setattr(dfs.metadata, "save", lambda: saves.append(1) or True)

    for _ in range(3):
        report = dfs.healer.repair("a.txt")
        assert report.target_reached
        assert not report.changed

    assert saves == []
    assert dfs.list_files() == [("a.txt", [1, 2, 3])]
    with open(metadata_file, encoding="utf-8") as f:
        assert f.read() == before


def test_repair_unknown_file_is_noop(dfs):
    report = dfs.healer.repair("fantasma.txt")

    assert report.source_node is None
    assert not report.changed


def test_repair_without_live_replica(dfs, make_source):
    """Test sin réplicas activas: no hay origen para copiar."""
    dfs.upload("a.txt", make_source("a.txt"))
    for node_id in (1, 2, 3):
        dfs.registry.fail(node_id)

    report = dfs.healer.repair("a.txt")

    assert report.source_node is None
    assert not report.changed
    assert not dfs.storage.exists(4, "a.txt")
    assert dfs.list_files() == [("a.txt", [1, 2, 3])]


def test_phase_b_expands_to_new_nodes(temp_storage_dir, metadata_file):
    """Test fase B: un archivo con pocas réplicas se expande a nodos nuevos."""
    with open(metadata_file, "w", encoding="utf-8") as f:
        f.write("a.txt:1,2\n")
    dfs = DistributedFileSystem(
        num_nodes=4,
        base_path=temp_storage_dir,
        metadata_file=metadata_file
    )
    dfs.storage.put(1, "a.txt", b"datos")

    report = dfs.healer.repair("a.txt")

    assert report.source_node == 1
    assert report.restored == []
    assert report.added == [3]
    assert dfs.list_files() == [("a.txt", [1, 2, 3])]
    assert dfs.storage.get(3, "a.txt") == b"datos"
    with open(metadata_file, encoding="utf-8") as f:
        assert f.read() == "a.txt:1,2,3\n"


def test_phase_a_then_phase_b(temp_storage_dir, metadata_file):
    with open(metadata_file, "w", encoding="utf-8") as f:
        f.write("a.txt:1,2\n")
    dfs = DistributedFileSystem(
        num_nodes=4,
        base_path=temp_storage_dir,
        metadata_file=metadata_file
    )
    dfs.storage.put(2, "a.txt", b"datos")
    dfs.registry.fail(1)

    report = dfs.healer.repair("a.txt")

    assert report.source_node == 2
    assert report.restored == [1]
    assert report.added == [3]
    assert dfs.list_files() == [("a.txt", [1, 2, 3])]


def test_repair_fault_keeps_and_persists_progress(temp_storage_dir, metadata_file, faulty_storage):
    """Test fallo a mitad de la re-replicación: el progreso se conserva."""
    with open(metadata_file, "w", encoding="utf-8") as f:
        f.write("a.txt:1\n")
    dfs = DistributedFileSystem(
        num_nodes=4,
        base_path=temp_storage_dir,
        metadata_file=metadata_file,
        storage=faulty_storage
    )
    dfs.storage.put(1, "a.txt", b"datos")
    faulty_storage.fail_on.add(("copy", 3))

    with pytest.raises(ReplicationFailed) as exc_info:
        dfs.healer.repair("a.txt")

    assert exc_info.value.node_id == 3
    assert dfs.list_files() == [("a.txt", [1, 2])]
    with open(metadata_file, encoding="utf-8") as f:
        assert f.read() == "a.txt:1,2\n"


def test_monitor_continues_after_repair_failure(faulty_dfs, make_source):
    faulty_dfs.upload("a.txt", make_source("a.txt"))
    faulty_dfs.upload("b.txt", make_source("b.txt"))
    faulty_dfs.storage.fail_on.add(("copy", 1, "a.txt"))
    faulty_dfs.registry.fail(1)

    results = _by_name(faulty_dfs.fail_node(2))

    assert results["a.txt"].error is not None
    assert results["a.txt"].repair is None
    assert results["b.txt"].error is None
    assert results["b.txt"].repair.restored == [1, 2]


def test_threshold_is_min_safe_not_replication_factor(dfs, make_source):
    """Test 2 réplicas activas de 3 no disparan re-replicación."""
    dfs.upload("a.txt", make_source("a.txt"))
    dfs.registry.fail(3)

    results = dfs.check_health()

    assert not results[0].at_risk
    assert not dfs.storage.exists(4, "a.txt")


def test_fail_and_recover_invalid_node(dfs):
    with pytest.raises(InvalidNodeId):
        dfs.fail_node(9)
    with pytest.raises(InvalidNodeId):
        dfs.recover_node(0)


def test_full_recovery_restores_replication_factor(dfs, make_source):
    """Test tras recuperar todos los nodos, el archivo tiene >= k réplicas activas."""
    dfs.upload("a.txt", make_source("a.txt"))
    dfs.fail_node(1)
    dfs.fail_node(2)
    size_after_failures = len(dfs.list_files()[0][1])

    dfs.recover_node(1)
    assert len(dfs.list_files()[0][1]) >= size_after_failures
    dfs.recover_node(2)

    results = dfs.check_health()
    replicas = dfs.list_files()[0][1]
    assert dfs.registry.count_active(replicas) >= 3
    assert results[0].active_replicas >= 3
    for node_id in replicas:
        assert dfs.storage.exists(node_id, "a.txt")
