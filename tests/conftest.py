"""
Configuración compartida de fixtures para pytest
"""
import os
import shutil
import tempfile

import pytest

from core.exceptions import StorageFault
from filesystem.distributed_fs import DistributedFileSystem
from storage.node_storage import NodeStorage


class FaultyStorage(NodeStorage):
    """
    Almacén que falla en las operaciones indicadas.

    fail_on contiene tuplas (operación, node_id) o
    (operación, node_id, filename); en copy el node_id es el destino.
    """

    def __init__(self, base_path: str):
        super().__init__(base_path)
        self.fail_on = set()

    def _check(self, op: str, node_id: int, filename: str):
        if (op, node_id) in self.fail_on or (op, node_id, filename) in self.fail_on:
            raise StorageFault(node_id, filename, "fallo inyectado")

    def put(self, node_id, filename, data):
        self._check("put", node_id, filename)
        super().put(node_id, filename, data)

    def get(self, node_id, filename):
        self._check("get", node_id, filename)
        return super().get(node_id, filename)

    def remove(self, node_id, filename):
        self._check("remove", node_id, filename)
        return super().remove(node_id, filename)

    def copy(self, source_id, target_id, filename):
        self._check("copy", target_id, filename)
        super().copy(source_id, target_id, filename)


@pytest.fixture
def temp_storage_dir():
    """Fixture que crea directorio temporal para tests."""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir)


@pytest.fixture
def metadata_file(temp_storage_dir):
    return os.path.join(temp_storage_dir, "metadata.txt")


@pytest.fixture
def make_source(temp_storage_dir):
    """Crea archivos origen para subir."""
    def _make(name: str, content: bytes = b"contenido de prueba") -> str:
        path = os.path.join(temp_storage_dir, "src", name)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "wb") as f:
            f.write(content)
        return path
    return _make


@pytest.fixture
def faulty_storage(temp_storage_dir):
    return FaultyStorage(temp_storage_dir)


@pytest.fixture
def dfs(temp_storage_dir, metadata_file):
    """Sistema de 4 nodos con k=3."""
    return DistributedFileSystem(
        num_nodes=4,
        base_path=temp_storage_dir,
        metadata_file=metadata_file
    )


@pytest.fixture
def faulty_dfs(temp_storage_dir, metadata_file, faulty_storage):
    """Sistema de 4 nodos sobre un almacén con fallos inyectables."""
    return DistributedFileSystem(
        num_nodes=4,
        base_path=temp_storage_dir,
        metadata_file=metadata_file,
        storage=faulty_storage
    )
