"""Manager for deriving and verifying selectively disclosed presentations."""

import logging
from typing import Mapping, Optional, Sequence, Tuple, Union

from .config.settings import PROOF_ENGINE_CLASS_SETTING, Settings
from .core.error import JsonLdProofsError
from .disclosure import (
    SkolemIssuer,
    deskolemize_nquads,
    diff_and_prepare,
    merge_deanon_map,
    skolemize,
)
from .engine.base import BaseProofEngine
from .engine.models import (
    BlindSignRequest,
    DeriveProofRequest,
    KeyPair,
    VcPair,
    VcPairRDF,
    VerifyResult,
)
from .jsonld.document_loader import DocumentLoader, get_default_document_loader
from .jsonld.error import LinkedDataError
from .jsonld.rdf import (
    VcRDF,
    expand,
    expanded_vc_to_rdf,
    jsonld_to_rdf,
    jsonld_vp_from_rdf,
    vc_to_rdf,
)
from .utils.classloader import ClassLoader

LOGGER = logging.getLogger(__name__)


class ProofManagerError(JsonLdProofsError):
    """Generic ProofManager Error."""


class ProofManager:
    """Class for signing credentials and deriving selective disclosure proofs."""

    def __init__(
        self,
        engine: BaseProofEngine,
        document_loader: DocumentLoader,
        settings: Optional[Settings] = None,
    ):
        """Initialize the proof manager.

        Args:
            engine: The cryptographic proof engine
            document_loader: Loader used to resolve JSON-LD contexts
            settings: Optional settings, defaults are used when omitted

        """
        self.engine = engine
        self.document_loader = document_loader
        self.settings = settings or Settings()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        document_loader: Optional[DocumentLoader] = None,
    ) -> "ProofManager":
        """Create a manager whose engine class is named in the settings."""
        engine_class = settings.get_str(PROOF_ENGINE_CLASS_SETTING)
        if not engine_class:
            raise ProofManagerError(f"Setting {PROOF_ENGINE_CLASS_SETTING} is required")

        engine_cls = ClassLoader.load_class(engine_class)
        if not issubclass(engine_cls, BaseProofEngine):
            raise ProofManagerError(
                f"{engine_class} is not a subclass of {BaseProofEngine.__name__}"
            )

        return cls(
            engine=engine_cls(),
            document_loader=document_loader or get_default_document_loader(),
            settings=settings,
        )

    def _new_issuer(self) -> SkolemIssuer:
        return SkolemIssuer(prefix=self.settings.skolem_prefix)

    async def key_gen(self) -> KeyPair:
        """Generate a new key pair."""
        return await self.engine.key_gen()

    def _prepare_vc(
        self, vc: dict, keys: Union[dict, list], purpose: str
    ) -> Tuple[VcRDF, str]:
        try:
            return (
                vc_to_rdf(vc, self.document_loader),
                jsonld_to_rdf(keys, self.document_loader),
            )
        except LinkedDataError as err:
            raise ProofManagerError(
                f"Unable to prepare credential for {purpose}"
            ) from err

    @staticmethod
    def _with_proof_value(vc_rdf: VcRDF, proof_value: str) -> dict:
        proof = {**vc_rdf.proof, "proofValue": proof_value}
        proof.pop("@context", None)
        return {**vc_rdf.document, "proof": proof}

    async def sign(
        self,
        vc: dict,
        key_pair: Union[dict, list],
        secret: Optional[bytes] = None,
    ) -> dict:
        """Sign a credential.

        Args:
            vc: Compact credential with a proof configuration lacking `proofValue`
            key_pair: JSON-LD document describing the signing key pair
            secret: Holder secret to bind the credential to

        Returns:
            The credential with `proof.proofValue` set

        """
        vc_rdf, key_pair_rdf = self._prepare_vc(vc, key_pair, "signing")

        proof_value = await self.engine.sign(
            vc_rdf.document_rdf, vc_rdf.proof_rdf, key_pair_rdf, secret=secret
        )
        return self._with_proof_value(vc_rdf, proof_value)

    async def verify(self, vc: dict, public_key: Union[dict, list]) -> VerifyResult:
        """Verify a signed credential."""
        vc_rdf, public_key_rdf = self._prepare_vc(vc, public_key, "verification")

        return await self.engine.verify(
            vc_rdf.document_rdf, vc_rdf.proof_rdf, public_key_rdf
        )

    async def request_blind_sign(
        self,
        secret: bytes,
        challenge: Optional[str] = None,
        skip_pok: bool = False,
    ) -> BlindSignRequest:
        """Commit to a holder secret so an issuer can sign over it blindly.

        Only the commitment and its proof of knowledge go to the issuer; the
        blinding factor is kept to unblind the issued credential.
        """
        return await self.engine.request_blind_sign(
            secret, challenge=challenge, skip_pok=skip_pok
        )

    async def verify_blind_sign_request(
        self,
        request: Union[BlindSignRequest, Mapping],
        challenge: Optional[str] = None,
    ) -> VerifyResult:
        """Check the holder's proof of knowledge before signing blindly."""
        request = BlindSignRequest.serde(request)
        if not request.pok_for_commitment:
            raise ProofManagerError("Blind sign request has no proof of knowledge")

        return await self.engine.verify_blind_sign_request(
            request.commitment, request.pok_for_commitment, challenge=challenge
        )

    async def blind_sign(
        self, commitment: str, vc: dict, key_pair: Union[dict, list]
    ) -> dict:
        """Sign a credential over a holder's committed secret.

        The returned credential carries a blinded `proofValue`, which the holder
        turns into a usable signature with `unblind`.
        """
        vc_rdf, key_pair_rdf = self._prepare_vc(vc, key_pair, "blind signing")

        proof_value = await self.engine.blind_sign(
            commitment, vc_rdf.document_rdf, vc_rdf.proof_rdf, key_pair_rdf
        )
        return self._with_proof_value(vc_rdf, proof_value)

    async def unblind(self, vc: dict, blinding: str) -> dict:
        """Unblind the proof value of a blind signed credential."""
        proof = vc.get("proof")
        if not isinstance(proof, dict) or "proofValue" not in proof:
            raise ProofManagerError("Credential has no proof value to unblind")

        proof_value = await self.engine.unblind(proof["proofValue"], blinding)
        return {**vc, "proof": {**proof, "proofValue": proof_value}}

    async def blind_verify(
        self, secret: bytes, vc: dict, public_key: Union[dict, list]
    ) -> VerifyResult:
        """Verify a credential signed over the given holder secret."""
        vc_rdf, public_key_rdf = self._prepare_vc(vc, public_key, "verification")

        return await self.engine.blind_verify(
            secret, vc_rdf.document_rdf, vc_rdf.proof_rdf, public_key_rdf
        )

    async def elliptic_elgamal_key_gen(self) -> KeyPair:
        """Generate a key pair for the opener of revocably anonymous proofs."""
        return await self.engine.elliptic_elgamal_key_gen()

    async def elliptic_elgamal_decrypt(self, secret_key: str, cipher_text: str) -> str:
        """Recover the holder identity encrypted into a presentation."""
        return await self.engine.elliptic_elgamal_decrypt(secret_key, cipher_text)

    async def get_encrypted_uid(self, secret: bytes) -> str:
        """Return the identity an opener recovers for a holder secret."""
        return await self.engine.get_encrypted_uid(secret)

    async def derive_proof(
        self,
        vc_pairs: Sequence[Union[VcPair, Mapping]],
        nonce: str,
        public_keys: Union[dict, list],
        context,
        challenge: Optional[str] = None,
        secret: Optional[bytes] = None,
        opener_pub_key: Optional[str] = None,
    ) -> dict:
        """Derive a presentation revealing only the disclosed credentials.

        Credential pairs are processed one at a time, in order, and their
        deanonymization maps merged into one map for the whole presentation.

        Args:
            vc_pairs: Original and disclosed credential pairs
            nonce: Nonce bound to the presentation
            public_keys: JSON-LD document with the issuers' public keys
            context: JSON-LD context used to compact the presentation
            challenge: Challenge bound to the presentation, if any
            secret: Holder secret of blind signed credentials
            opener_pub_key: Opener public key the holder identity is encrypted
                to, for revocable anonymity

        Returns:
            The presentation in JSON-LD

        Raises:
            DisclosureError: If a disclosed credential cannot be prepared
            ProofManagerError: If a document cannot be processed as JSON-LD

        """
        issuer = self._new_issuer()
        deanon_map = {}
        vc_pairs_rdf = []

        try:
            public_keys_rdf = jsonld_to_rdf(public_keys, self.document_loader)

            for index, pair in enumerate(vc_pairs):
                pair = VcPair.serde(pair)
                LOGGER.debug("Preparing credential pair %d", index)

                expanded_vc = skolemize(
                    expand(pair.original, self.document_loader), issuer
                )
                expanded_disclosed_vc = expand(pair.disclosed, self.document_loader)

                local_deanon_map, edited_disclosed_vc = diff_and_prepare(
                    expanded_vc, expanded_disclosed_vc, issuer
                )
                deanon_map = merge_deanon_map(deanon_map, local_deanon_map)

                original_document, original_proof = expanded_vc_to_rdf(
                    expanded_vc, self.document_loader
                )
                disclosed_document, disclosed_proof = expanded_vc_to_rdf(
                    edited_disclosed_vc, self.document_loader
                )

                vc_pairs_rdf.append(
                    VcPairRDF(
                        original_document=deskolemize_nquads(original_document, issuer),
                        original_proof=deskolemize_nquads(original_proof, issuer),
                        disclosed_document=deskolemize_nquads(
                            disclosed_document, issuer
                        ),
                        disclosed_proof=deskolemize_nquads(disclosed_proof, issuer),
                    )
                )
        except LinkedDataError as err:
            LOGGER.warning("Credential pair rejected: %s", err.roll_up)
            raise ProofManagerError(
                "Unable to prepare credentials for proof derivation"
            ) from err

        LOGGER.debug(
            "Deriving proof for %d credentials with %d pseudonyms",
            len(vc_pairs_rdf),
            len(deanon_map),
        )
        vp_rdf = await self.engine.derive_proof(
            DeriveProofRequest(
                vc_pairs=vc_pairs_rdf,
                deanon_map=deanon_map,
                nonce=nonce,
                key_graph=public_keys_rdf,
                challenge=challenge,
                secret=secret,
                opener_pub_key=opener_pub_key,
            )
        )

        try:
            return jsonld_vp_from_rdf(vp_rdf, context, self.document_loader)
        except LinkedDataError as err:
            raise ProofManagerError("Unable to convert derived presentation") from err

    async def verify_proof(
        self,
        vp: dict,
        nonce: str,
        public_keys: Union[dict, list],
        challenge: Optional[str] = None,
        opener_pub_key: Optional[str] = None,
    ) -> VerifyResult:
        """Verify a derived presentation.

        `challenge` and `opener_pub_key` must match the ones the presentation was
        derived with, when it was.
        """
        try:
            vp_rdf = jsonld_to_rdf(vp, self.document_loader)
            public_keys_rdf = jsonld_to_rdf(public_keys, self.document_loader)
        except LinkedDataError as err:
            raise ProofManagerError(
                "Unable to prepare presentation for verification"
            ) from err

        return await self.engine.verify_proof(
            vp_rdf,
            nonce,
            public_keys_rdf,
            challenge=challenge,
            opener_pub_key=opener_pub_key,
        )
