from .base import BaseProofEngine
from .models import (
    BlindSignRequest,
    DeriveProofRequest,
    KeyPair,
    VcPair,
    VcPairRDF,
    VerifyResult,
)

__all__ = [
    "BaseProofEngine",
    "BlindSignRequest",
    "DeriveProofRequest",
    "KeyPair",
    "VcPair",
    "VcPairRDF",
    "VerifyResult",
]
