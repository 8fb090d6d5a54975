"""Skolemization of blank nodes.

Blank node labels are not stable between independently expanded documents, so
anonymous nodes are given skolem identifiers (IRIs) before two documents are
compared, and the identifiers are turned back into blank nodes once the documents
have been converted to RDF.

e.g _:b0 => urn:bnid:4f0c... => _:4f0c...
"""

import logging
from typing import Dict, Optional, Union
from uuid import uuid4

from pyld.jsonld import JsonLdProcessor

LOGGER = logging.getLogger(__name__)

SKOLEM_PREFIX = "urn:bnid:"
BLANK_NODE_PREFIX = "_:"

# keys that only describe a graph object, not a node
GRAPH_OBJECT_KEYS = {"@graph", "@index", "@context"}


def is_blank_node_id(value) -> bool:
    """Check whether `value` is a blank node label."""
    return isinstance(value, str) and value.startswith(BLANK_NODE_PREFIX)


def _is_node_object(value: dict) -> bool:
    if "@value" in value or "@list" in value or "@set" in value:
        return False
    return not ("@graph" in value and set(value) <= GRAPH_OBJECT_KEYS)


class SkolemIssuer:
    """Issue skolem identifiers for one presentation operation.

    Every identifier handed out is remembered together with the blank node label it
    turns back into, so identifiers stay unique across all documents of the
    operation and can be reversed after RDF conversion.
    """

    def __init__(self, prefix: str = SKOLEM_PREFIX):
        """Create new SkolemIssuer instance."""
        self.prefix = prefix
        self._labels: Dict[str, str] = {}

    def issue(self) -> str:
        """Issue a fresh skolem identifier for an anonymous node."""
        while True:
            # N-Quads blank node labels must start with a letter
            suffix = f"b{uuid4().hex}"
            skolem_id = f"{self.prefix}{suffix}"
            if skolem_id not in self._labels:
                self._labels[skolem_id] = f"{BLANK_NODE_PREFIX}{suffix}"
                return skolem_id

    def skolem_id_for(self, label: str) -> str:
        """Return the skolem identifier that turns back into exactly `label`.

        Used for pseudonyms, which must keep their label through RDF conversion so
        they match the keys of the deanonymization map.
        """
        if not is_blank_node_id(label):
            raise ValueError(f"Not a blank node label: {label}")

        skolem_id = f"{self.prefix}{label[len(BLANK_NODE_PREFIX):]}"
        self._labels[skolem_id] = label
        return skolem_id

    def label_for(self, skolem_id: str) -> Optional[str]:
        """Return the blank node label for an issued skolem identifier."""
        return self._labels.get(skolem_id)

    def is_skolem_id(self, value) -> bool:
        """Check whether `value` was issued by this issuer."""
        return isinstance(value, str) and value in self._labels

    def __len__(self) -> int:
        """Return the number of identifiers issued so far."""
        return len(self._labels)


def skolemize(
    tree: Union[dict, list], issuer: SkolemIssuer
) -> Union[dict, list]:
    """Return a copy of an expanded document with every blank node skolemized.

    Node objects without `@id` get a fresh identifier. Blank node labels get one
    identifier per label, so repeated references to the same node stay joined.
    Labels are scoped to this document: the same label in another document is a
    different node and gets a different identifier.
    """
    scope: Dict[str, str] = {}

    def _skolem_id(label: str) -> str:
        if label not in scope:
            scope[label] = issuer.issue()
        return scope[label]

    def _walk(value):
        if isinstance(value, list):
            return [_walk(item) for item in value]
        if not isinstance(value, dict):
            return value
        if "@value" in value:
            return dict(value)

        node = {}
        for key, item in value.items():
            if key in ("@id", "@context"):
                node[key] = item
            elif key == "@reverse":
                # a reverse property map is not a node, only its values are
                node[key] = {prop: _walk(values) for prop, values in item.items()}
            else:
                node[key] = _walk(item)
        node_id = value.get("@id")
        if is_blank_node_id(node_id):
            node["@id"] = _skolem_id(node_id)
        elif node_id is None and _is_node_object(value):
            node["@id"] = issuer.issue()
        return node

    skolemized = _walk(tree)
    LOGGER.debug("Skolemized %d blank node labels", len(scope))
    return skolemized


def deskolemize_nquads(nquads: str, issuer: SkolemIssuer) -> str:
    """Turn the skolem identifiers issued by `issuer` back into blank nodes.

    IRIs the issuer did not hand out are left as they are.

    Args:
        nquads (str): N-Quads serialized dataset
        issuer (SkolemIssuer): The issuer of the skolem identifiers

    Returns:
        str: N-Quads with skolem identifiers replaced by blank node labels

    """

    def _term(term: dict) -> dict:
        if term["type"] == "IRI" and issuer.is_skolem_id(term["value"]):
            return {"type": "blank node", "value": issuer.label_for(term["value"])}
        return term

    dataset = JsonLdProcessor.parse_nquads(nquads)
    deskolemized = {}
    for graph_name, triples in dataset.items():
        if issuer.is_skolem_id(graph_name):
            graph_name = issuer.label_for(graph_name)
        deskolemized.setdefault(graph_name, []).extend(
            {
                **triple,
                "subject": _term(triple["subject"]),
                "object": _term(triple["object"]),
            }
            for triple in triples
        )

    return JsonLdProcessor.to_nquads(deskolemized)
