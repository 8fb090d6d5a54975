"""Conversion between JSON-LD credentials and N-Quads."""

import copy
import logging
from typing import NamedTuple, Tuple, Union

from pyld import jsonld
from pyld.jsonld import JsonLdError

from .constants import (
    EXPANDED_TYPE_CREDENTIALS_CONTEXT_V1_VP_TYPE,
    NQUADS_FORMAT,
    SECURITY_PROOF_URL,
)
from .document_loader import DocumentLoader
from .error import LinkedDataError

LOGGER = logging.getLogger(__name__)


class VcRDF(NamedTuple):
    """A credential split into document and proof, with their N-Quads."""

    document: dict
    proof: dict
    document_rdf: str
    proof_rdf: str


def jsonld_to_rdf(
    document: Union[dict, list], document_loader: DocumentLoader
) -> str:
    """Convert a JSON-LD document to N-Quads."""
    try:
        return jsonld.to_rdf(
            document,
            {"format": NQUADS_FORMAT, "documentLoader": document_loader},
        )
    except JsonLdError as err:
        raise LinkedDataError("Unable to convert JSON-LD document to RDF") from err


def vc_to_rdf(vc: dict, document_loader: DocumentLoader) -> VcRDF:
    """Split a compact credential into document and proof and convert both.

    The proof is converted on its own, using the credential's context.
    """
    document = copy.deepcopy(vc)
    proof = document.pop("proof", None)
    if not isinstance(proof, dict):
        raise LinkedDataError("Credential must contain a single proof object")
    proof["@context"] = document.get("@context")

    return VcRDF(
        document=document,
        proof=proof,
        document_rdf=jsonld_to_rdf(document, document_loader),
        proof_rdf=jsonld_to_rdf(proof, document_loader),
    )


def expanded_vc_to_rdf(
    expanded: Union[dict, list], document_loader: DocumentLoader
) -> Tuple[str, str]:
    """Split an expanded credential into document and proof and convert both.

    The proof graph is removed from the credential and its nodes are converted
    as a dataset of their own.

    Returns:
        Tuple[str, str]: document and proof N-Quads

    """
    document = copy.deepcopy(expanded)
    nodes = document if isinstance(document, list) else [document]

    proofs = [
        node.pop(SECURITY_PROOF_URL) for node in nodes if SECURITY_PROOF_URL in node
    ]
    if not proofs:
        raise LinkedDataError("Expanded credential does not contain a proof")

    proof_nodes = [
        item
        for proof in proofs
        for entry in proof
        for item in entry.get("@graph", [entry])
    ]

    return (
        jsonld_to_rdf(document, document_loader),
        jsonld_to_rdf(proof_nodes, document_loader),
    )


def jsonld_vp_from_rdf(
    vp_rdf: str, context, document_loader: DocumentLoader
) -> dict:
    """Convert N-Quads of a presentation back to JSON-LD.

    The result is framed on the presentation type and compacted with `context`.
    """
    try:
        expanded = jsonld.from_rdf(vp_rdf, {"format": NQUADS_FORMAT})
        return jsonld.frame(
            expanded,
            {
                "@context": context,
                "@type": EXPANDED_TYPE_CREDENTIALS_CONTEXT_V1_VP_TYPE,
            },
            {"documentLoader": document_loader},
        )
    except JsonLdError as err:
        raise LinkedDataError("Unable to convert RDF presentation to JSON-LD") from err


def expand(document: Union[dict, list], document_loader: DocumentLoader) -> list:
    """Expand a JSON-LD document."""
    try:
        return jsonld.expand(document, {"documentLoader": document_loader})
    except JsonLdError as err:
        raise LinkedDataError("Unable to expand JSON-LD document") from err
