"""
Pairing annotation records with image files on disk.

Annotation `imageId` values are free-form strings typed or generated on the
frontend, so they are matched against the stored filenames rather than
trusted. Two strategies exist:

- exact: each annotation goes to the file whose name equals its imageId,
  compared case-sensitively first and then case-insensitively. Annotations
  without a match are dropped.
- fallback: used when very few distinct imageIds exist next to a much
  larger pool of files, which usually means the ids were entered wrong.
  Annotations are cut into contiguous chunks and spread over the sorted
  files, ignoring imageId. The pairing is approximate by nature.
"""

import math
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from core.logging import get_logger
from models.domain.annotation import AnnotationRecord
from models.domain.training import ReconciliationMode

logger = get_logger(__name__)

FALLBACK_MAX_UNIQUE_IDS = 3
FALLBACK_FILE_RATIO = 2


class Reconciliation(BaseModel):
    """Outcome of pairing annotations with files."""

    image_annotations: Dict[str, List[AnnotationRecord]] = Field(
        default_factory=dict,
        description="Filename -> annotations, in order of first assignment",
    )
    mode: ReconciliationMode = ReconciliationMode.EXACT
    unique_image_ids: List[str] = Field(default_factory=list)
    unresolved_image_ids: List[str] = Field(default_factory=list)

    @property
    def annotated_image_files(self) -> List[str]:
        return list(self.image_annotations.keys())

    @property
    def assigned_annotations(self) -> int:
        return sum(len(anns) for anns in self.image_annotations.values())


def group_by_image_id(annotations: List[AnnotationRecord]) -> Dict[str, List[AnnotationRecord]]:
    """Group annotations by imageId, keeping first-seen order."""
    groups: Dict[str, List[AnnotationRecord]] = {}
    for annotation in annotations:
        groups.setdefault(annotation.image_id, []).append(annotation)
    return groups


def should_use_fallback(unique_image_ids: int, image_files: int) -> bool:
    """Sparse distinct imageIds next to a much larger file pool."""
    return (
        unique_image_ids < FALLBACK_MAX_UNIQUE_IDS
        and image_files >= unique_image_ids * FALLBACK_FILE_RATIO
    )


def find_matching_file(image_id: str, image_files: List[str]) -> Optional[str]:
    """First file whose name equals image_id, exactly or ignoring case. No partial matches."""
    image_id_lower = image_id.lower()
    for image_file in image_files:
        if image_file == image_id or image_file.lower() == image_id_lower:
            return image_file
    return None


def match_exact(
    annotations: List[AnnotationRecord],
    image_files: List[str],
) -> Dict[str, List[AnnotationRecord]]:
    image_map: Dict[str, List[AnnotationRecord]] = {}

    for annotation in annotations:
        matching_file = find_matching_file(annotation.image_id, image_files)

        if matching_file is None:
            preview = ", ".join(image_files[:5]) + ("..." if len(image_files) > 5 else "")
            logger.warning(
                f"No image file matches imageId '{annotation.image_id}' "
                f"(annotation {annotation.id}); available: {preview}"
            )
            continue

        if matching_file not in image_map:
            image_map[matching_file] = []
            logger.debug(f"Added image to export: {matching_file}")
        image_map[matching_file].append(annotation)

    return image_map


def assign_fallback(
    annotations: List[AnnotationRecord],
    image_files: List[str],
) -> Dict[str, List[AnnotationRecord]]:
    """Chunk the full annotation list over lexicographically sorted files."""
    sorted_files = sorted(image_files)
    slots = min(len(annotations), len(sorted_files))
    if slots == 0:
        return {}

    per_image = math.ceil(len(annotations) / slots)
    image_map: Dict[str, List[AnnotationRecord]] = {}

    for i in range(slots):
        chunk = annotations[i * per_image:(i + 1) * per_image]
        if chunk:
            image_map[sorted_files[i]] = chunk
            logger.debug(f"Fallback: assigned {len(chunk)} annotations to {sorted_files[i]}")

    return image_map


def reconcile(
    annotations: List[AnnotationRecord],
    image_files: List[str],
) -> Reconciliation:
    """Build the filename -> annotations map used for the export."""
    groups = group_by_image_id(annotations)
    unique_ids = list(groups.keys())

    logger.info(
        f"Reconciling {len(annotations)} annotations over {len(unique_ids)} unique imageIds "
        f"and {len(image_files)} image files"
    )

    if should_use_fallback(len(unique_ids), len(image_files)):
        logger.info(
            f"Using fallback assignment: only {len(unique_ids)} unique imageIds "
            f"for {len(image_files)} images"
        )
        image_map = assign_fallback(annotations, image_files)
        mode = ReconciliationMode.FALLBACK
        unresolved: List[str] = []
    else:
        image_map = match_exact(annotations, image_files)
        mode = ReconciliationMode.EXACT
        resolved = {a.image_id for anns in image_map.values() for a in anns}
        unresolved = [image_id for image_id in unique_ids if image_id not in resolved]

    result = Reconciliation(
        image_annotations=image_map,
        mode=mode,
        unique_image_ids=unique_ids,
        unresolved_image_ids=unresolved,
    )

    logger.info(
        f"Matched {len(result.annotated_image_files)} images "
        f"({result.assigned_annotations}/{len(annotations)} annotations, mode={mode.value})"
    )
    return result
