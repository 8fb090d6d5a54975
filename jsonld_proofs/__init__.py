"""Selective disclosure of JSON-LD verifiable credentials."""

from .manager import ProofManager, ProofManagerError
from .version import __version__

__all__ = ["ProofManager", "ProofManagerError", "__version__"]
