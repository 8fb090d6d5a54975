"""Compare an expanded credential with its disclosed counterpart."""

import logging
import re
from typing import Dict, NamedTuple, Union

from .error import ConflictError, InvalidDisclosureError
from .path import Path
from .skolem import SkolemIssuer, is_blank_node_id

LOGGER = logging.getLogger(__name__)

DeanonMap = Dict[str, str]
EditMap = Dict[Path, str]

# keys of a node object that are not compared value by value
NODE_KEYWORDS_SKIPPED = {"@id", "@type", "@index", "@context"}


class DiffResult(NamedTuple):
    """Result of comparing a credential with its disclosed counterpart.

    deanon_map: pseudonym => value it stands for in the original
    skolem_id_map: disclosed path => skolem id to inject as `@id`
    masked_id_map: disclosed path => skolem id of the pseudonym hiding an IRI
    masked_literal_map: disclosed path => skolem id of the pseudonym hiding a literal
    """

    deanon_map: DeanonMap
    skolem_id_map: EditMap
    masked_id_map: EditMap
    masked_literal_map: EditMap


def literal_lexical_form(value) -> str:
    """Return the RDF lexical form of an expanded `@value`."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        # canonical xsd:double, as produced by JSON-LD to RDF conversion
        return re.sub(r"(\d)0*E\+?0*(\d)", r"\1E\2", "%1.15E" % value)
    return str(value)


def _matches(value, d_value) -> bool:
    """Check whether an original value can be the source of a disclosed value."""
    if not (isinstance(value, dict) and isinstance(d_value, dict)):
        return value == d_value

    if "@value" in d_value:
        if "@value" not in value:
            return False
        if is_blank_node_id(d_value["@value"]):
            return True
        return all(
            value.get(key) == d_value.get(key)
            for key in ("@value", "@type", "@language")
        )

    if "@list" in d_value:
        return "@list" in value
    if "@value" in value or "@list" in value:
        return False

    d_id = d_value.get("@id")
    if d_id is not None and not is_blank_node_id(d_id):
        return value.get("@id") == d_id

    d_types = d_value.get("@type") or []
    return all(d_type in (value.get("@type") or []) for d_type in d_types)


def diff_vc(
    original: Union[dict, list], disclosed: Union[dict, list], issuer: SkolemIssuer
) -> DiffResult:
    """Compare an original expanded credential with its disclosed counterpart.

    The original is expected to be skolemized. The disclosed document is walked
    in lock-step with it; values kept by the discloser are matched to original
    values in order, so the disclosed document must keep the original ordering of
    the values it does not drop.

    Pseudonyms (blank node labels in the disclosed document) standing for an
    original identifier or literal are recorded in the deanonymization map, and
    the paths at which skolem identifiers must be injected into the disclosed
    document are recorded in the edit maps.

    Args:
        original: Skolemized expanded credential
        disclosed: Expanded disclosed credential
        issuer: Skolem issuer of the current operation

    Returns:
        DiffResult: deanonymization map and edit maps

    Raises:
        InvalidDisclosureError: If the disclosed document is not a redaction of
            the original, or a literal placeholder is malformed
        ConflictError: If a pseudonym stands for two different values

    """
    result = DiffResult({}, {}, {}, {})

    def _record(pseudonym: str, value: str):
        existing = result.deanon_map.get(pseudonym)
        if existing is not None and existing != value:
            LOGGER.warning("Pseudonym %s is used for different values", pseudonym)
            raise ConflictError(pseudonym, existing, value)
        result.deanon_map[pseudonym] = value

    def _diff_values(values, d_values, path: Path):
        if not isinstance(d_values, list):
            d_values = [d_values]
        if not isinstance(values, list):
            values = [values]

        index = 0
        for d_index, d_value in enumerate(d_values):
            while index < len(values) and not _matches(values[index], d_value):
                index += 1
            if index == len(values):
                raise InvalidDisclosureError(
                    f"Disclosed value at {path + (d_index,)} not found in original"
                )
            if isinstance(d_value, dict):
                _diff_value(values[index], d_value, path + (d_index,))
            index += 1

    def _diff_value(node: dict, d_node: dict, path: Path):
        if "@value" in d_node:
            _diff_literal(node, d_node, path)
            return
        if "@list" in d_node:
            _diff_values(node["@list"], d_node["@list"], path + ("@list",))
            return

        _diff_id(node, d_node, path)

        for key, d_values in d_node.items():
            if key in NODE_KEYWORDS_SKIPPED:
                continue
            if key not in node:
                raise InvalidDisclosureError(
                    f"Disclosed property `{key}` at {path} not found in original"
                )
            if key == "@reverse":
                for prop, d_reverse_values in d_values.items():
                    if prop not in node[key]:
                        raise InvalidDisclosureError(
                            f"Disclosed reverse property `{prop}` at {path} "
                            "not found in original"
                        )
                    _diff_values(
                        node[key][prop], d_reverse_values, path + (key, prop)
                    )
                continue
            _diff_values(node[key], d_values, path + (key,))

    def _diff_id(node: dict, d_node: dict, path: Path):
        o_id = node.get("@id")
        d_id = d_node.get("@id")

        if d_id is None:
            # anonymous in both: join with the original node
            if issuer.is_skolem_id(o_id):
                result.skolem_id_map[path] = o_id
            return

        if not is_blank_node_id(d_id):
            if d_id != o_id:
                raise InvalidDisclosureError(
                    f"Disclosed identifier `{d_id}` at {path} does not match original"
                )
            return

        if d_id == o_id:
            return

        skolem_id = issuer.skolem_id_for(d_id)
        if o_id is None:
            LOGGER.debug("Pseudonym %s hides a node without identifier", d_id)
            result.skolem_id_map[path] = skolem_id
        elif issuer.is_skolem_id(o_id):
            _record(d_id, issuer.label_for(o_id))
            result.skolem_id_map[path] = skolem_id
        elif is_blank_node_id(o_id):
            _record(d_id, o_id)
            result.skolem_id_map[path] = skolem_id
        else:
            _record(d_id, o_id)
            result.masked_id_map[path] = skolem_id

    def _diff_literal(node: dict, d_node: dict, path: Path):
        d_value = d_node["@value"]
        if not is_blank_node_id(d_value) or node.get("@value") == d_value:
            return

        if "@value" not in node:
            raise InvalidDisclosureError(
                f"Literal placeholder at {path} does not stand for a literal"
            )
        d_type = d_node.get("@type")
        if d_type is not None and not isinstance(d_type, str):
            LOGGER.warning("Malformed literal placeholder at %s", path)
            raise InvalidDisclosureError(
                f"Literal placeholder at {path} has invalid type: {d_type!r}"
            )
        if d_type is not None and d_type != node.get("@type"):
            raise InvalidDisclosureError(
                f"Literal placeholder at {path} has type `{d_type}`, "
                f"original literal has `{node.get('@type')}`"
            )

        _record(d_value, literal_lexical_form(node["@value"]))
        result.masked_literal_map[path] = issuer.skolem_id_for(d_value)

    if isinstance(original, dict) and isinstance(disclosed, dict):
        _diff_value(original, disclosed, ())
    else:
        _diff_values(original, disclosed, ())

    LOGGER.debug(
        "Diff found %d pseudonyms, %d skolem ids, %d masked ids, %d masked literals",
        len(result.deanon_map),
        len(result.skolem_id_map),
        len(result.masked_id_map),
        len(result.masked_literal_map),
    )
    return result
