"""
Training archive assembly.

Layout of the produced ZIP:

    <datasetName>_Training_<timestamp>/
        config.yaml
        images/<filename>
        labels/<basename>.txt
"""

import io
import zipfile
from typing import List

import yaml

from models.domain.training import TrainingConfig


def root_folder_name(dataset_name: str, timestamp: int) -> str:
    return f"{dataset_name}_Training_{timestamp}"


def build_config_yaml(config: TrainingConfig, class_names: List[str], project_name: str) -> str:
    """Render the training manifest read by the worker."""
    manifest = config.to_manifest(class_names, project_name)
    return yaml.safe_dump(manifest, sort_keys=False, default_flow_style=False, allow_unicode=True)


class TrainingArchive:
    """
    In-memory ZIP with the fixed training folder layout.

    Usage:
        with TrainingArchive(root) as archive:
            archive.add_image("a.jpg", data)
            archive.add_label("a.txt", "0 0.5 0.5 0.1 0.1")
        payload = archive.getvalue()
    """

    def __init__(self, root: str):
        self.root = root
        self._buffer = io.BytesIO()
        self._zip = zipfile.ZipFile(self._buffer, mode="w", compression=zipfile.ZIP_DEFLATED)
        for folder in ("", "images/", "labels/"):
            self._zip.writestr(f"{root}/{folder}", b"")

    def __enter__(self) -> "TrainingArchive":
        return self

    def __exit__(self, *args):
        self.close()

    def add_image(self, filename: str, data: bytes):
        self._zip.writestr(f"{self.root}/images/{filename}", data)

    def add_label(self, filename: str, content: str):
        self._zip.writestr(f"{self.root}/labels/{filename}", content.encode("utf-8"))

    def add_config(self, content: str):
        self._zip.writestr(f"{self.root}/config.yaml", content.encode("utf-8"))

    def close(self):
        self._zip.close()

    def getvalue(self) -> bytes:
        """Archive bytes; only complete after close()."""
        return self._buffer.getvalue()
