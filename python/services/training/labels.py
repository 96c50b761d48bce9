"""
Detection label conversion.

Boxes are stored as absolute pixel geometry {x, y, width, height} and are
written as one line per box:

    <class_index> <center_x> <center_y> <width> <height>

with every coordinate divided by a fixed reference size and printed with
six decimals, exact halves rounded up (0.0703125 -> 0.070313).
"""

import os
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List

from core.config import settings
from core.logging import get_logger
from models.domain.annotation import AnnotationClass, AnnotationRecord

logger = get_logger(__name__)

LABEL_EXTENSION = ".txt"
_SIX_PLACES = Decimal("0.000001")


def build_class_mapping(classes: List[AnnotationClass]) -> Dict[str, int]:
    """Class name -> zero-based index, in the order classes were returned."""
    mapping: Dict[str, int] = {}
    for index, annotation_class in enumerate(classes):
        mapping[annotation_class.name] = index
    return mapping


def format_coordinate(value: float) -> str:
    return str(Decimal(value).quantize(_SIX_PLACES, rounding=ROUND_HALF_UP))


def to_label_line(
    annotation: AnnotationRecord,
    class_mapping: Dict[str, int],
    ref_width: float = None,
    ref_height: float = None,
) -> str:
    """
    Convert one annotation to a normalized label line.

    Labels missing from class_mapping get index 0, the same index as the
    first class.
    """
    ref_width = ref_width or settings.label_reference_width
    ref_height = ref_height or settings.label_reference_height

    box = annotation.geometry
    center_x = (box.x + box.width / 2) / ref_width
    center_y = (box.y + box.height / 2) / ref_height
    norm_width = box.width / ref_width
    norm_height = box.height / ref_height

    class_index = class_mapping.get(annotation.label, 0)
    if annotation.label not in class_mapping:
        logger.debug(f"Label '{annotation.label}' has no class entry, using index 0")

    coords = " ".join(format_coordinate(v) for v in (center_x, center_y, norm_width, norm_height))
    return f"{class_index} {coords}"


def to_label_file(
    annotations: List[AnnotationRecord],
    class_mapping: Dict[str, int],
    ref_width: float = None,
    ref_height: float = None,
) -> str:
    """Newline-joined label lines for one image (no trailing newline)."""
    return "\n".join(
        to_label_line(annotation, class_mapping, ref_width, ref_height)
        for annotation in annotations
    )


def label_filename(image_filename: str) -> str:
    """cat.01.jpg -> cat.01.txt"""
    return os.path.splitext(image_filename)[0] + LABEL_EXTENSION
