"""Apply the edits found by the differ to a disclosed credential."""

import logging
from typing import Dict, Union

from .diff import DeanonMap, DiffResult
from .error import ConflictError, InvalidDisclosureError, MissingMappingError
from .path import locate

LOGGER = logging.getLogger(__name__)


def apply_masking(disclosed: Union[dict, list], diff: DiffResult) -> DeanonMap:
    """Inject skolem ids and masked values into the disclosed document in place.

    Skolem ids are injected first, then masked identifiers, then masked literals.
    Masked literal nodes become plain reference nodes, and the datatype of each
    masked literal is appended to its deanonymization entry as `^^<datatype>`.

    Args:
        disclosed: Expanded disclosed credential, edited in place
        diff: Result of comparing the credential with its original

    Returns:
        The credential's deanonymization map with literal datatypes applied

    """
    deanon_map = dict(diff.deanon_map)
    folded: Dict[str, str] = {}

    for path, skolem_id in diff.skolem_id_map.items():
        locate(disclosed, path)["@id"] = skolem_id

    for path, masked in diff.masked_id_map.items():
        locate(disclosed, path)["@id"] = masked

    for path, masked in diff.masked_literal_map.items():
        node = locate(disclosed, path)

        value = node.get("@value")
        if not isinstance(value, str):
            raise InvalidDisclosureError(
                f"Literal placeholder at {path} must be a string, got {value!r}"
            )
        typ = node.get("@type")
        if typ is not None and not isinstance(typ, str):
            raise InvalidDisclosureError(
                f"Literal placeholder at {path} has invalid type: {typ!r}"
            )

        lexical = diff.deanon_map.get(value)
        if lexical is None:
            raise MissingMappingError(f"deanonMap[{value}] has no value")

        entry = f"{lexical}^^<{typ}>" if typ is not None else lexical
        if value in folded and folded[value] != entry:
            raise ConflictError(value, folded[value], entry)
        folded[value] = entry
        deanon_map[value] = entry

        node["@id"] = masked
        for key in ("@value", "@type", "@language", "@direction"):
            node.pop(key, None)

    LOGGER.debug(
        "Injected %d skolem ids, %d masked ids, %d masked literals",
        len(diff.skolem_id_map),
        len(diff.masked_id_map),
        len(diff.masked_literal_map),
    )
    return deanon_map
