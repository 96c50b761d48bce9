"""
Dataset file storage.
Uploaded images live on local disk, one directory per dataset:
    <uploads_dir>/datasets/<dataset_id>/<filename>
"""

import os
from typing import List, Optional

from core.config import settings
from core.exceptions import StorageReadError
from core.logging import get_logger

logger = get_logger(__name__)

IMAGE_EXTENSIONS = ('.jpg', '.jpeg', '.png', '.bmp', '.webp')


class LocalDatasetStorage:
    """Read-only view over dataset image directories."""

    def __init__(self, root: str = None):
        self.root = root or settings.datasets_dir
        logger.info(f"Dataset storage initialized at {self.root}")

    def dataset_path(self, dataset_id: str) -> str:
        return os.path.join(self.root, dataset_id)

    def list_files(self, dataset_id: str) -> List[str]:
        """
        List image filenames stored for a dataset.

        Only regular files with a known image extension are returned,
        in directory order. A missing directory is treated as empty.
        """
        path = self.dataset_path(dataset_id)
        try:
            entries = os.listdir(path)
        except FileNotFoundError:
            logger.warning(f"Dataset directory does not exist: {path}")
            return []

        image_files = [
            name for name in entries
            if name.lower().endswith(IMAGE_EXTENSIONS)
            and os.path.isfile(os.path.join(path, name))
        ]

        logger.info(f"Dataset {dataset_id}: {len(entries)} files, {len(image_files)} images")
        return image_files

    def read_file(self, dataset_id: str, filename: str) -> bytes:
        """
        Read one stored file.

        Raises:
            StorageReadError: file is missing, unreadable or outside the dataset directory
        """
        path = self._resolve(dataset_id, filename)
        if path is None:
            raise StorageReadError(filename, "path escapes dataset directory")

        try:
            with open(path, "rb") as f:
                return f.read()
        except OSError as e:
            raise StorageReadError(filename, e.strerror or str(e)) from e

    def _resolve(self, dataset_id: str, filename: str) -> Optional[str]:
        base = os.path.realpath(self.dataset_path(dataset_id))
        path = os.path.realpath(os.path.join(base, filename))
        if os.path.dirname(path) != base:
            return None
        return path


# Global instance
_dataset_storage: Optional[LocalDatasetStorage] = None


def get_dataset_storage() -> LocalDatasetStorage:
    """Get singleton LocalDatasetStorage instance."""
    global _dataset_storage
    if _dataset_storage is None:
        _dataset_storage = LocalDatasetStorage()
    return _dataset_storage
