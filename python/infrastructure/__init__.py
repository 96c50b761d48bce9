"""
Infrastructure package - external dependencies and integrations.

Modules:
- dataset_storage.py - Dataset image files on local disk
- worker_client.py - HTTP client for the training worker
"""

from infrastructure.dataset_storage import LocalDatasetStorage, get_dataset_storage
from infrastructure.worker_client import WorkerClient, get_worker_client

__all__ = [
    'LocalDatasetStorage',
    'get_dataset_storage',
    'WorkerClient',
    'get_worker_client',
]
