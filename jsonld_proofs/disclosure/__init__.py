from .deanon import merge_deanon_map, merge_deanon_maps
from .diff import DeanonMap, DiffResult, diff_vc
from .error import (
    ConflictError,
    DisclosureError,
    InvalidDisclosureError,
    MissingMappingError,
    PathError,
)
from .path import Path, locate
from .prepare import diff_and_prepare
from .rewrite import apply_masking
from .skolem import SkolemIssuer, deskolemize_nquads, is_blank_node_id, skolemize

__all__ = [
    "locate",
    "Path",
    "SkolemIssuer",
    "skolemize",
    "deskolemize_nquads",
    "is_blank_node_id",
    "diff_vc",
    "DiffResult",
    "DeanonMap",
    "merge_deanon_map",
    "merge_deanon_maps",
    "apply_masking",
    "diff_and_prepare",
    # Exceptions
    "DisclosureError",
    "InvalidDisclosureError",
    "ConflictError",
    "MissingMappingError",
    "PathError",
]
