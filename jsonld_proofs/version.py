"""Library version information."""

__version__ = "0.1.0"

USER_AGENT = f"jsonld-proofs/{__version__}"
