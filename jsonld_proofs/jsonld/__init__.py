from .document_loader import DocumentLoader, get_default_document_loader
from .error import DocumentLoaderError, LinkedDataError
from .rdf import (
    VcRDF,
    expand,
    expanded_vc_to_rdf,
    jsonld_to_rdf,
    jsonld_vp_from_rdf,
    vc_to_rdf,
)

__all__ = [
    "DocumentLoader",
    "get_default_document_loader",
    "VcRDF",
    "expand",
    "expanded_vc_to_rdf",
    "jsonld_to_rdf",
    "jsonld_vp_from_rdf",
    "vc_to_rdf",
    # Exceptions
    "LinkedDataError",
    "DocumentLoaderError",
]
