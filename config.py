"""
Configuración del sistema ReplicaFS.
"""

# Configuración del clúster
NUM_NODES = 4  # 4 nodos recomendados para triple replicación

# Configuración de replicación
REPLICATION_FACTOR = 3  # Réplicas activas objetivo por archivo
MIN_SAFE_REPLICAS = 2  # Por debajo de este valor se dispara la re-replicación

# Configuración de almacenamiento
STORAGE_BASE_PATH = "."  # Directorio donde se crean node_1, node_2, ...
NODE_DIR_PREFIX = "node_"
METADATA_FILE = "metadata.txt"
DOWNLOAD_PREFIX = "downloaded_"

# Configuración de logging
LOG_LEVEL = "INFO"  # DEBUG, INFO, WARNING, ERROR
LOG_FILE = "replicafs.log"
