"""Proof engine interface.

The engine owns all of the cryptography: key generation, signing and verifying
credentials, blind signing, deriving presentations and verifying them. Every
document input is RDF in N-Quads form.
"""

from abc import ABC, abstractmethod
from typing import Optional

from .models import BlindSignRequest, DeriveProofRequest, KeyPair, VerifyResult


class BaseProofEngine(ABC):
    """Base proof engine."""

    @abstractmethod
    async def key_gen(self) -> KeyPair:
        """Generate a new key pair."""

    @abstractmethod
    async def sign(
        self,
        document_rdf: str,
        proof_rdf: str,
        key_graph: str,
        *,
        secret: Optional[bytes] = None,
    ) -> str:
        """Sign a credential, returning the proof value.

        Args:
            document_rdf (str): N-Quads of the credential without its proof
            proof_rdf (str): N-Quads of the proof configuration
            key_graph (str): N-Quads of the key material
            secret (bytes): Holder secret to bind into the signature, if any

        Returns:
            str: The proof value

        """

    @abstractmethod
    async def verify(
        self, document_rdf: str, proof_rdf: str, key_graph: str
    ) -> VerifyResult:
        """Verify a signed credential."""

    @abstractmethod
    async def request_blind_sign(
        self,
        secret: bytes,
        challenge: Optional[str] = None,
        skip_pok: bool = False,
    ) -> BlindSignRequest:
        """Commit to a holder secret for blind signing.

        Args:
            secret (bytes): The holder secret
            challenge (str): Challenge the proof of knowledge is bound to
            skip_pok (bool): Omit the proof of knowledge of the committed secret

        Returns:
            BlindSignRequest: The commitment, its proof of knowledge and the
                blinding factor

        """

    @abstractmethod
    async def verify_blind_sign_request(
        self,
        commitment: str,
        pok_for_commitment: str,
        challenge: Optional[str] = None,
    ) -> VerifyResult:
        """Verify the proof of knowledge attached to a commitment."""

    @abstractmethod
    async def blind_sign(
        self, commitment: str, document_rdf: str, proof_rdf: str, key_graph: str
    ) -> str:
        """Sign a credential over a committed holder secret.

        Returns:
            str: The blinded proof value

        """

    @abstractmethod
    async def unblind(self, signature: str, blinding: str) -> str:
        """Remove the blinding factor from a blinded proof value."""

    @abstractmethod
    async def blind_verify(
        self, secret: bytes, document_rdf: str, proof_rdf: str, key_graph: str
    ) -> VerifyResult:
        """Verify a credential signed over a holder secret."""

    @abstractmethod
    async def derive_proof(self, request: DeriveProofRequest) -> str:
        """Derive a presentation from prepared credential pairs.

        Args:
            request (DeriveProofRequest): The credential pairs, the deanonymization
                map of the presentation, the nonce and the key material, with the
                optional holder secret and revocable anonymity inputs

        Returns:
            str: N-Quads of the presentation

        """

    @abstractmethod
    async def verify_proof(
        self,
        vp_rdf: str,
        nonce: str,
        key_graph: str,
        *,
        challenge: Optional[str] = None,
        opener_pub_key: Optional[str] = None,
    ) -> VerifyResult:
        """Verify a derived presentation."""

    @abstractmethod
    async def elliptic_elgamal_key_gen(self) -> KeyPair:
        """Generate an ElGamal key pair for an opener of presentations."""

    @abstractmethod
    async def elliptic_elgamal_decrypt(self, secret_key: str, cipher_text: str) -> str:
        """Decrypt the holder identity encrypted into a presentation."""

    @abstractmethod
    async def get_encrypted_uid(self, secret: bytes) -> str:
        """Return the identity an opener recovers for a holder secret."""
