"""
disawsm Project Package
=======================

User overlays (entrypoints, labels, comments), the .dis project record and
the file helpers that load programs and save or restore projects.
"""

from disawsm.project.overlays import (
    Comment,
    CommentOverlay,
    EntrypointList,
    Label,
    LabelOverlay,
    LABEL_PATTERN,
    is_valid_label,
)
from disawsm.project.records import PROJECT_VERSION, SUPPORTED_VERSIONS, ProjectRecord
from disawsm.project.files import (
    LoadedProgram,
    load_binary,
    load_prg,
    load_project,
    parse_prg,
    project_filename,
    save_project,
)

__all__ = [
    "Comment",
    "CommentOverlay",
    "EntrypointList",
    "Label",
    "LabelOverlay",
    "LABEL_PATTERN",
    "is_valid_label",
    "PROJECT_VERSION",
    "SUPPORTED_VERSIONS",
    "ProjectRecord",
    "LoadedProgram",
    "load_binary",
    "load_prg",
    "load_project",
    "parse_prg",
    "project_filename",
    "save_project",
]
