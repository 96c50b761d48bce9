import io
import zipfile

import pytest
import yaml

from core.exceptions import NoAnnotationsError, NoMatchedImagesError, StorageReadError
from models.domain.training import ReconciliationMode, TrainingConfig
from services.training import build_export

TIMESTAMP = 1700000000000
ROOT = f"cats_Training_{TIMESTAMP}"


def _export(storage, annotations, classes, config=None):
    return build_export(
        storage,
        dataset_id="dataset-1",
        dataset_name="cats",
        annotations=annotations,
        classes=classes,
        image_files=list(storage.files),
        config=config or TrainingConfig(),
        timestamp=TIMESTAMP,
    )


def _open(result):
    return zipfile.ZipFile(io.BytesIO(result.archive))


def test_archive_layout(fake_storage, make_annotation, classes):
    storage = fake_storage({"a.jpg": b"A", "b.png": b"B", "c.jpg": b"C", "d.jpg": b"D"})
    annotations = [
        make_annotation("a.jpg"),
        make_annotation("a.jpg", label="dog"),
        make_annotation("b.png"),
        make_annotation("zzz.jpg"),
    ]

    result = _export(storage, annotations, classes)

    with _open(result) as archive:
        names = set(archive.namelist())
        assert {
            f"{ROOT}/",
            f"{ROOT}/images/",
            f"{ROOT}/labels/",
            f"{ROOT}/config.yaml",
            f"{ROOT}/images/a.jpg",
            f"{ROOT}/images/b.png",
            f"{ROOT}/labels/a.txt",
            f"{ROOT}/labels/b.txt",
        } == names
        assert archive.read(f"{ROOT}/images/a.jpg") == b"A"
        assert archive.read(f"{ROOT}/labels/a.txt").decode().split("\n") == [
            "0 0.093750 0.070313 0.156250 0.078125",
            "1 0.093750 0.070313 0.156250 0.078125",
        ]

    assert result.root_folder == ROOT
    assert result.annotated_images == ["a.jpg", "b.png"]
    assert result.total_annotated_images == 2
    assert result.total_annotations == 4
    assert result.labeled_annotations == 3
    assert result.class_names == ["cat", "dog"]
    assert result.reconciliation == ReconciliationMode.EXACT


def test_config_manifest(fake_storage, make_annotation, classes):
    storage = fake_storage({"a.jpg": b"A"})
    config = TrainingConfig.model_validate({"epochs": 5, "modelType": "yolov8n"})

    result = _export(storage, [make_annotation("a.jpg")], classes, config)

    with _open(result) as archive:
        raw = archive.read(f"{ROOT}/config.yaml").decode()
    manifest = yaml.safe_load(raw)

    assert list(manifest) == [
        "epochs", "batch_size", "img_size", "learning_rate", "model",
        "num_classes", "class_names", "project_name", "train_val_split",
    ]
    assert manifest == {
        "epochs": 5,
        "batch_size": 16,
        "img_size": 640,
        "learning_rate": 0.001,
        "model": "yolov8n",
        "num_classes": 2,
        "class_names": ["cat", "dog"],
        "project_name": ROOT,
        "train_val_split": "80/20",
    }


def test_label_line_count_matches_assignment(fake_storage, make_annotation, classes):
    files = {f"{i}.jpg": b"x" for i in range(2)}
    storage = fake_storage(files)
    annotations = [make_annotation("0.jpg") for _ in range(10)]

    result = _export(storage, annotations, classes)

    assert result.reconciliation == ReconciliationMode.FALLBACK
    with _open(result) as archive:
        for image in result.annotated_images:
            label = image.rsplit(".", 1)[0] + ".txt"
            lines = archive.read(f"{ROOT}/labels/{label}").decode().split("\n")
            assert len(lines) == 5


def test_unreadable_image_is_skipped(fake_storage, make_annotation, classes):
    storage = fake_storage({"a.jpg": b"A", "b.jpg": b"B", "c.jpg": b"C"}, unreadable={"b.jpg"})
    annotations = [make_annotation("a.jpg"), make_annotation("b.jpg"), make_annotation("c.jpg")]

    result = _export(storage, annotations, classes)

    assert result.annotated_images == ["a.jpg", "c.jpg"]
    assert result.skipped_images == ["b.jpg"]
    with _open(result) as archive:
        assert f"{ROOT}/images/b.jpg" not in archive.namelist()
        assert f"{ROOT}/labels/b.txt" not in archive.namelist()


def test_all_images_unreadable(fake_storage, make_annotation, classes):
    storage = fake_storage({"a.jpg": b"A"}, unreadable={"a.jpg"})

    with pytest.raises(StorageReadError) as exc_info:
        _export(storage, [make_annotation("a.jpg")], classes)

    assert exc_info.value.status_code == 500


def test_no_annotations_fails_before_io(fake_storage, classes):
    storage = fake_storage({"a.jpg": b"A"})

    with pytest.raises(NoAnnotationsError):
        _export(storage, [], classes)

    assert storage.reads == []


def test_no_matched_images_payload(fake_storage, make_annotation, classes):
    files = {f"img_{i:02d}.jpg": b"x" for i in range(12)}
    storage = fake_storage(files)
    annotations = [make_annotation("x.jpg"), make_annotation("y.jpg"), make_annotation("z.jpg")]

    with pytest.raises(NoMatchedImagesError) as exc_info:
        _export(storage, annotations, classes)

    details = exc_info.value.details
    assert details["availableImages"] == [f"img_{i:02d}.jpg" for i in range(10)]
    assert details["annotationImageIds"] == ["x.jpg", "y.jpg", "z.jpg"]
    assert exc_info.value.status_code == 400
    assert storage.reads == []
