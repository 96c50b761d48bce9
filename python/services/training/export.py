"""
Training export builder.

Turns a dataset's annotations and stored images into a training archive:
reconcile annotations with files, convert boxes to normalized labels and
package everything together with a config.yaml manifest.
"""

import time
from typing import List, Optional

from core.exceptions import NoAnnotationsError, NoMatchedImagesError, StorageReadError
from core.logging import get_logger
from models.domain.annotation import AnnotationClass, AnnotationRecord
from models.domain.training import ExportResult, TrainingConfig
from services.training.archive import TrainingArchive, build_config_yaml, root_folder_name
from services.training.labels import build_class_mapping, label_filename, to_label_file
from services.training.reconciliation import reconcile

logger = get_logger(__name__)


def build_export(
    storage,
    dataset_id: str,
    dataset_name: str,
    annotations: List[AnnotationRecord],
    classes: List[AnnotationClass],
    image_files: List[str],
    config: TrainingConfig,
    timestamp: Optional[int] = None,
) -> ExportResult:
    """
    Build the training archive for one dataset.

    Args:
        storage: object exposing read_file(dataset_id, filename) -> bytes
        dataset_id: Dataset whose files are read
        dataset_name: Used for the archive's top-level folder
        annotations: All annotations of the dataset
        classes: Annotation classes; their order defines label indices
        image_files: Image filenames present in dataset storage
        config: Training configuration written to config.yaml
        timestamp: Milliseconds since epoch (defaults to now)

    Raises:
        NoAnnotationsError: annotations is empty
        NoMatchedImagesError: no annotation could be paired with a file
        StorageReadError: none of the paired files could be read
    """
    if not annotations:
        raise NoAnnotationsError(dataset_id)

    if timestamp is None:
        timestamp = int(time.time() * 1000)

    class_mapping = build_class_mapping(classes)
    class_names = [c.name for c in classes]
    logger.info(f"Exporting {len(annotations)} annotations with {len(class_names)} classes: {class_names}")

    reconciliation = reconcile(annotations, image_files)
    if not reconciliation.image_annotations:
        raise NoMatchedImagesError(image_files[:10], reconciliation.unresolved_image_ids)

    root = root_folder_name(dataset_name, timestamp)
    written: List[str] = []
    skipped: List[str] = []
    labeled = 0

    with TrainingArchive(root) as archive:
        for image_file, image_annotations in reconciliation.image_annotations.items():
            try:
                image_bytes = storage.read_file(dataset_id, image_file)
            except StorageReadError as e:
                logger.error(f"Skipping image {image_file}: {e.message}")
                skipped.append(image_file)
                continue

            archive.add_image(image_file, image_bytes)
            archive.add_label(
                label_filename(image_file),
                to_label_file(image_annotations, class_mapping),
            )
            written.append(image_file)
            labeled += len(image_annotations)
            logger.debug(f"Added {image_file} with {len(image_annotations)} annotations")

        if not written:
            raise StorageReadError(", ".join(skipped), "none of the matched images could be read")

        archive.add_config(build_config_yaml(config, class_names, root))

    payload = archive.getvalue()
    logger.info(
        f"Built archive {root}: {len(written)} images, {labeled} labels, "
        f"{len(skipped)} skipped, {len(payload)} bytes"
    )

    return ExportResult(
        archive=payload,
        root_folder=root,
        timestamp=timestamp,
        annotated_images=written,
        skipped_images=skipped,
        total_annotations=len(annotations),
        labeled_annotations=labeled,
        class_names=class_names,
        reconciliation=reconciliation.mode,
    )
