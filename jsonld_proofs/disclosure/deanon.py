"""Merge deanonymization maps across the credentials of a presentation."""

import logging
from functools import reduce
from typing import Dict, Iterable, Mapping

from .error import ConflictError

LOGGER = logging.getLogger(__name__)


def merge_deanon_map(
    global_map: Mapping[str, str], local_map: Mapping[str, str]
) -> Dict[str, str]:
    """Merge a credential's deanonymization map into the presentation-wide map.

    Args:
        global_map: Map accumulated over the previous credentials
        local_map: Map of the current credential

    Returns:
        A new merged map; the inputs are left untouched

    Raises:
        ConflictError: If a pseudonym already maps to a different value

    """
    merged = dict(global_map)
    for pseudonym, value in local_map.items():
        existing = merged.get(pseudonym)
        if existing is not None and existing != value:
            LOGGER.warning("Conflicting values for pseudonym %s", pseudonym)
            raise ConflictError(pseudonym, existing, value)
        merged[pseudonym] = value
    return merged


def merge_deanon_maps(local_maps: Iterable[Mapping[str, str]]) -> Dict[str, str]:
    """Fold a sequence of deanonymization maps into one, in order."""
    return reduce(merge_deanon_map, local_maps, {})
