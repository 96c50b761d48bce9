import asyncio
import base64
import io
import time
import zipfile

import pytest

from core.exceptions import (
    BadRequestError,
    DatasetNotFoundError,
    NoAnnotationsError,
    ProjectNotFoundError,
    UploadDispatchError,
)
from models.requests.training import ExportToWorkerRequest, StartRunpodRequest, StartTrainingRequest
from models.domain.training import WorkerUploadResult
from services.training_service import TrainingService


class FakeWorker:
    def __init__(self, fail=False):
        self.fail = fail
        self.uploads = []
        self.raw_uploads = []
        self.started = []

    async def upload_dataset(self, archive, upload_path, training_config, auto_start=True):
        self.uploads.append((archive, upload_path, training_config, auto_start))
        if self.fail:
            raise UploadDispatchError("Worker request failed: 500 - boom", status_code=500, body="boom")
        return WorkerUploadResult(
            success=True,
            file_name=f"{upload_path}.zip",
            presigned_url="https://storage.test/signed",
            bucket="datasets",
            upload_path=upload_path,
        )

    async def upload_raw(self, archive, upload_path, training_config, auto_start=False):
        self.raw_uploads.append((archive, upload_path, training_config, auto_start))
        return {"success": True, "fileName": f"{upload_path}.zip"}

    async def start_training(self, dataset_name, training_config):
        self.started.append((dataset_name, training_config))
        return {"success": True, "trainingId": "t-1", "podId": "pod-1", "status": "starting", "message": "ok"}

    async def training_status(self, training_id):
        return {"id": training_id, "status": "running"}


def _request(**overrides):
    body = {
        "projectId": "project-1",
        "datasetId": "dataset-1",
        "datasetName": "cats",
        "trainingConfig": {"epochs": 5, "batchSize": 8},
    }
    body.update(overrides)
    return StartTrainingRequest.model_validate(body)


@pytest.fixture
def service_parts(fake_database, fake_storage, make_annotation, classes):
    db = fake_database(
        annotations=[make_annotation("a.jpg"), make_annotation("b.jpg"), make_annotation("c.jpg")],
        classes=classes,
    )
    storage = fake_storage({"a.jpg": b"A", "b.jpg": b"B", "c.jpg": b"C"})
    worker = FakeWorker()
    return db, storage, worker


def test_start_training_uploads_archive(service_parts):
    db, storage, worker = service_parts
    service = TrainingService(db, storage, worker)

    response = asyncio.run(service.start_training("user-1", _request()))

    assert len(worker.uploads) == 1
    archive, upload_path, config, auto_start = worker.uploads[0]
    assert auto_start is True
    assert config == {"epochs": 5, "batchSize": 8}
    assert upload_path.startswith("user-1/cats_")

    timestamp = upload_path.rsplit("_", 1)[1]
    assert response.training_id == f"training_{timestamp}"
    assert response.upload_path == upload_path
    assert response.object_name == f"{upload_path}.zip"
    assert response.download_url == "https://storage.test/signed"
    assert response.bucket_name == "datasets"
    assert response.total_annotated_images == 3
    assert response.total_annotations == 3
    assert response.class_names == ["cat", "dog"]
    assert response.training_config == {"epochs": 5, "batchSize": 8}

    with zipfile.ZipFile(io.BytesIO(archive)) as zf:
        assert f"cats_Training_{timestamp}/config.yaml" in zf.namelist()


def test_response_serializes_camel_case(service_parts):
    db, storage, worker = service_parts
    response = asyncio.run(TrainingService(db, storage, worker).start_training("user-1", _request()))

    body = response.model_dump(by_alias=True)

    assert body["message"] == "Training dataset uploaded successfully through worker"
    assert body["downloadUrlExpiresIn"] == "7 days"
    assert {"trainingId", "objectName", "bucketName", "downloadUrl", "totalAnnotatedImages",
            "totalAnnotations", "classNames", "trainingConfig", "uploadPath"} <= set(body)


def test_project_of_other_user_is_not_found(service_parts):
    db, storage, worker = service_parts

    with pytest.raises(ProjectNotFoundError) as exc_info:
        asyncio.run(TrainingService(db, storage, worker).start_training("intruder", _request()))

    assert exc_info.value.status_code == 404
    assert worker.uploads == []


def test_missing_dataset_is_not_found(service_parts):
    db, storage, worker = service_parts

    with pytest.raises(DatasetNotFoundError):
        asyncio.run(TrainingService(db, storage, worker).start_training("user-1", _request(datasetId="nope")))


def test_no_annotations_stops_before_storage(service_parts):
    db, storage, worker = service_parts
    db.annotations = []

    with pytest.raises(NoAnnotationsError):
        asyncio.run(TrainingService(db, storage, worker).start_training("user-1", _request()))

    assert storage.listings == 0
    assert storage.reads == []
    assert worker.uploads == []


def test_dispatch_failure_propagates(service_parts):
    db, storage, _ = service_parts
    worker = FakeWorker(fail=True)

    with pytest.raises(UploadDispatchError) as exc_info:
        asyncio.run(TrainingService(db, storage, worker).start_training("user-1", _request()))

    assert exc_info.value.status_code == 502
    assert exc_info.value.details["body"] == "boom"


def test_start_runpod_requires_dataset_url(service_parts):
    db, storage, worker = service_parts

    with pytest.raises(BadRequestError) as exc_info:
        asyncio.run(TrainingService(db, storage, worker).start_runpod(StartRunpodRequest()))

    assert exc_info.value.status_code == 400
    assert worker.started == []


def test_start_runpod_defaults_dataset_name(service_parts):
    db, storage, worker = service_parts
    request = StartRunpodRequest.model_validate({"datasetUrl": "https://storage.test/cats.zip"})

    response = asyncio.run(TrainingService(db, storage, worker).start_runpod(request))

    assert worker.started == [("training-dataset", {})]
    assert response.pod_id == "pod-1"
    assert response.worker_message == "ok"


def test_export_to_worker_decodes_base64(service_parts):
    db, storage, worker = service_parts
    request = ExportToWorkerRequest.model_validate({
        "datasetZip": base64.b64encode(b"PK-data").decode(),
        "datasetName": "cats",
    })

    result = asyncio.run(TrainingService(db, storage, worker).export_to_worker("user-1", request))

    archive, upload_path, config, auto_start = worker.raw_uploads[0]
    assert archive == b"PK-data"
    assert upload_path.startswith("user-1/cats_")
    assert auto_start is False
    assert config == {}
    assert result["success"] is True


def test_export_to_worker_keeps_given_upload_path(service_parts):
    db, storage, worker = service_parts
    request = ExportToWorkerRequest.model_validate({
        "datasetZip": base64.b64encode(b"zip").decode(),
        "datasetName": "cats",
        "uploadPath": "custom/path",
    })

    asyncio.run(TrainingService(db, storage, worker).export_to_worker("user-1", request))

    assert worker.raw_uploads[0][1] == "custom/path"


def test_export_to_worker_rejects_missing_fields(service_parts):
    db, storage, worker = service_parts

    with pytest.raises(BadRequestError):
        asyncio.run(TrainingService(db, storage, worker).export_to_worker(
            "user-1", ExportToWorkerRequest.model_validate({"datasetName": "cats"})
        ))


def test_export_to_worker_rejects_bad_base64(service_parts):
    db, storage, worker = service_parts
    request = ExportToWorkerRequest.model_validate({"datasetZip": "not base64!", "datasetName": "cats"})

    with pytest.raises(BadRequestError):
        asyncio.run(TrainingService(db, storage, worker).export_to_worker("user-1", request))


class SlowStorage:
    """Wraps a storage and sleeps on every blocking call."""

    def __init__(self, inner, delay):
        self.inner = inner
        self.delay = delay

    def list_files(self, dataset_id):
        time.sleep(self.delay)
        return self.inner.list_files(dataset_id)

    def read_file(self, dataset_id, filename):
        time.sleep(self.delay)
        return self.inner.read_file(dataset_id, filename)


def test_export_keeps_event_loop_responsive(service_parts):
    db, storage, worker = service_parts
    service = TrainingService(db, SlowStorage(storage, delay=0.15), worker)

    async def run_beside_ticker():
        gaps = []
        done = asyncio.Event()

        async def tick():
            last = time.monotonic()
            while not done.is_set():
                await asyncio.sleep(0.02)
                now = time.monotonic()
                gaps.append(now - last)
                last = now

        ticker = asyncio.create_task(tick())
        try:
            response = await service.start_training("user-1", _request())
        finally:
            done.set()
            await ticker
        return response, gaps

    response, gaps = asyncio.run(run_beside_ticker())

    assert response.total_annotated_images == 3
    # 4 blocking calls of 0.15s would freeze the loop for 0.6s
    assert len(gaps) > 10
    assert max(gaps) < 0.12
