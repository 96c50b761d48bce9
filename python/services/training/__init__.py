"""
Training Package - dataset export for detection model training.

Modules:
- reconciliation.py - Pair annotation imageIds with stored image files
- labels.py - Box geometry to normalized label lines
- archive.py - ZIP layout and config.yaml manifest
- export.py - Build the complete training archive
"""

from .reconciliation import (
    Reconciliation,
    reconcile,
    group_by_image_id,
    should_use_fallback,
    find_matching_file,
)
from .labels import build_class_mapping, to_label_line, to_label_file, label_filename
from .archive import TrainingArchive, build_config_yaml, root_folder_name
from .export import build_export

__all__ = [
    # Reconciliation
    "Reconciliation",
    "reconcile",
    "group_by_image_id",
    "should_use_fallback",
    "find_matching_file",

    # Labels
    "build_class_mapping",
    "to_label_line",
    "to_label_file",
    "label_filename",

    # Archive
    "TrainingArchive",
    "build_config_yaml",
    "root_folder_name",

    # Export
    "build_export",
]
