"""Models exchanged with the proof engine."""

import base64
import binascii
from typing import Any, Dict, List, Optional, Sequence, Union

from marshmallow import ValidationError, fields

from ..models.base import BaseModel, BaseModelSchema


class B64Value(fields.Str):
    """Bytes carried as an unpadded base64-URL string."""

    def _serialize(self, value, attr, obj, **kwargs) -> Optional[str]:
        if value is None:
            return None
        if not isinstance(value, bytes):
            raise ValidationError("Expected bytes")
        return base64.urlsafe_b64encode(value).decode("ascii").rstrip("=")

    def _deserialize(self, value, attr, data, **kwargs) -> Any:
        value = super()._deserialize(value, attr, data, **kwargs)
        try:
            return base64.urlsafe_b64decode(value + "=" * (-len(value) % 4))
        except binascii.Error:
            raise ValidationError("Error decoding base64 value")


class KeyPair(BaseModel):
    """Key pair generated by the proof engine."""

    class Meta:
        """KeyPair metadata."""

        schema_class = "KeyPairSchema"

    def __init__(self, *, public_key: str, secret_key: Optional[str] = None):
        """Create new KeyPair instance."""
        self.public_key = public_key
        self.secret_key = secret_key


class KeyPairSchema(BaseModelSchema):
    """Key pair schema."""

    class Meta:
        """KeyPairSchema metadata."""

        model_class = KeyPair

    public_key = fields.Str(required=True, data_key="publicKey")
    secret_key = fields.Str(required=False, data_key="secretKey")


class VerifyResult(BaseModel):
    """Verification result reported by the proof engine."""

    class Meta:
        """VerifyResult metadata."""

        schema_class = "VerifyResultSchema"

    def __init__(self, *, verified: bool, error: Optional[str] = None):
        """Create new VerifyResult instance."""
        self.verified = verified
        self.error = error


class VerifyResultSchema(BaseModelSchema):
    """Verify result schema."""

    class Meta:
        """VerifyResultSchema metadata."""

        model_class = VerifyResult

    verified = fields.Boolean(required=True)
    error = fields.Str(required=False)


class BlindSignRequest(BaseModel):
    """Commitment to a holder secret, sent to the issuer for blind signing.

    The blinding factor stays with the holder, which uses it to unblind the
    signature the issuer returns. The request sent to the issuer carries the
    commitment and its proof of knowledge only.
    """

    class Meta:
        """BlindSignRequest metadata."""

        schema_class = "BlindSignRequestSchema"

    def __init__(
        self,
        *,
        commitment: str,
        blinding: Optional[str] = None,
        pok_for_commitment: Optional[str] = None,
    ):
        """Create new BlindSignRequest instance."""
        self.commitment = commitment
        self.blinding = blinding
        self.pok_for_commitment = pok_for_commitment


class BlindSignRequestSchema(BaseModelSchema):
    """Blind sign request schema."""

    class Meta:
        """BlindSignRequestSchema metadata."""

        model_class = BlindSignRequest

    commitment = fields.Str(required=True)
    blinding = fields.Str(required=False)
    pok_for_commitment = fields.Str(required=False, data_key="pokForCommitment")


class VcPair(BaseModel):
    """An original credential and its disclosed counterpart."""

    class Meta:
        """VcPair metadata."""

        schema_class = "VcPairSchema"

    def __init__(self, *, original: dict, disclosed: dict):
        """Create new VcPair instance."""
        self.original = original
        self.disclosed = disclosed


class VcPairSchema(BaseModelSchema):
    """Credential pair schema."""

    class Meta:
        """VcPairSchema metadata."""

        model_class = VcPair

    original = fields.Dict(required=True)
    disclosed = fields.Dict(required=True)


class VcPairRDF(BaseModel):
    """N-Quads of a prepared credential pair."""

    class Meta:
        """VcPairRDF metadata."""

        schema_class = "VcPairRDFSchema"

    def __init__(
        self,
        *,
        original_document: str,
        original_proof: str,
        disclosed_document: str,
        disclosed_proof: str,
    ):
        """Create new VcPairRDF instance."""
        self.original_document = original_document
        self.original_proof = original_proof
        self.disclosed_document = disclosed_document
        self.disclosed_proof = disclosed_proof


class VcPairRDFSchema(BaseModelSchema):
    """Credential pair N-Quads schema."""

    class Meta:
        """VcPairRDFSchema metadata."""

        model_class = VcPairRDF

    original_document = fields.Str(required=True, data_key="originalDocument")
    original_proof = fields.Str(required=True, data_key="originalProof")
    disclosed_document = fields.Str(required=True, data_key="disclosedDocument")
    disclosed_proof = fields.Str(required=True, data_key="disclosedProof")


class DeriveProofRequest(BaseModel):
    """Input of the proof engine for deriving a presentation."""

    class Meta:
        """DeriveProofRequest metadata."""

        schema_class = "DeriveProofRequestSchema"

    def __init__(
        self,
        *,
        vc_pairs: Sequence[Union[VcPairRDF, dict]],
        deanon_map: Dict[str, str],
        nonce: str,
        key_graph: str,
        challenge: Optional[str] = None,
        secret: Optional[bytes] = None,
        opener_pub_key: Optional[str] = None,
    ):
        """Create new DeriveProofRequest instance.

        `secret` is the holder secret bound into blind signed credentials, and
        `opener_pub_key` the public key the holder identity is encrypted to for
        revocable anonymity.
        """
        self.vc_pairs: List[VcPairRDF] = [VcPairRDF.serde(pair) for pair in vc_pairs]
        self.deanon_map = deanon_map
        self.nonce = nonce
        self.key_graph = key_graph
        self.challenge = challenge
        self.secret = secret
        self.opener_pub_key = opener_pub_key


class DeriveProofRequestSchema(BaseModelSchema):
    """Derive proof request schema."""

    class Meta:
        """DeriveProofRequestSchema metadata."""

        model_class = DeriveProofRequest

    vc_pairs = fields.List(
        fields.Nested(VcPairRDFSchema), required=True, data_key="vcPairs"
    )
    deanon_map = fields.Dict(
        keys=fields.Str(), values=fields.Str(), required=True, data_key="deanonMap"
    )
    nonce = fields.Str(required=True)
    key_graph = fields.Str(required=True, data_key="keyGraph")
    challenge = fields.Str(required=False)
    secret = B64Value(required=False)
    opener_pub_key = fields.Str(required=False, data_key="openerPubKey")
