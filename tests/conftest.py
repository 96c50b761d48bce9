"""
Shared fixtures.

Environment is set before any application module is imported so the cached
Settings pick it up.
"""

import os
import tempfile
from datetime import datetime, timezone

os.environ.setdefault("UPLOADS_DIR", tempfile.mkdtemp(prefix="edge-mind-uploads-"))
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("WORKER_URL", "http://worker.test")

import pytest

from core.exceptions import StorageReadError
from models.domain.annotation import AnnotationClass, AnnotationRecord, BoundingBox
from models.domain.dataset import Dataset, Project


class FakeStorage:
    """In-memory dataset storage; names in `unreadable` fail on read."""

    def __init__(self, files=None, unreadable=()):
        self.files = dict(files or {})
        self.unreadable = set(unreadable)
        self.reads = []
        self.listings = 0

    def list_files(self, dataset_id):
        self.listings += 1
        return list(self.files)

    def read_file(self, dataset_id, filename):
        self.reads.append(filename)
        if filename in self.unreadable or filename not in self.files:
            raise StorageReadError(filename, "Permission denied")
        return self.files[filename]


class FakeDatabase:
    """Implements the PostgresClient lookups used by the service and routers."""

    def __init__(self, user_id="user-1", annotations=None, classes=None, user_annotations=None):
        self.user_id = user_id
        self.project = Project(id="project-1", name="Cats", user_id=user_id)
        self.dataset = Dataset(id="dataset-1", name="cats", project_id="project-1", user_id=user_id)
        self.annotations = list(annotations or [])
        self.classes = list(classes or [])
        self.user_annotations = list(user_annotations or [])

    async def get_user_by_id(self, user_id):
        if user_id == self.user_id:
            return {"id": user_id, "email": "owner@example.com"}
        return None

    async def get_project_for_user(self, project_id, user_id):
        if project_id == self.project.id and user_id == self.user_id:
            return self.project
        return None

    async def get_dataset_for_user(self, dataset_id, user_id):
        if dataset_id == self.dataset.id and user_id == self.user_id:
            return self.dataset
        return None

    async def list_annotations(self, dataset_id):
        return list(self.annotations)

    async def list_annotation_classes(self, dataset_id, user_id):
        return list(self.classes)

    async def list_user_annotations(self, user_id):
        return list(self.user_annotations)

    async def list_datasets_for_user(self, user_id):
        if user_id != self.user_id:
            return []
        return [
            {
                "id": self.dataset.id,
                "name": self.dataset.name,
                "createdAt": datetime(2024, 1, 1, tzinfo=timezone.utc),
                "project": {"id": self.project.id, "name": self.project.name},
            }
        ]


@pytest.fixture
def make_annotation():
    """Factory: make_annotation("a.jpg", label="cat", x=..., ...)"""
    counter = {"n": 0}

    def _make(image_id, label="cat", x=10, y=20, width=100, height=50):
        counter["n"] += 1
        return AnnotationRecord(
            id=f"ann-{counter['n']}",
            class_id="class-1",
            image_id=image_id,
            dataset_id="dataset-1",
            geometry=BoundingBox(x=x, y=y, width=width, height=height),
            label=label,
        )

    return _make


@pytest.fixture
def classes():
    return [
        AnnotationClass(id="class-1", name="cat", color="#ff0000"),
        AnnotationClass(id="class-2", name="dog", color="#00ff00"),
    ]


@pytest.fixture
def fake_storage():
    return FakeStorage


@pytest.fixture
def fake_database():
    return FakeDatabase
