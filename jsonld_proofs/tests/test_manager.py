from copy import deepcopy
from unittest import IsolatedAsyncioTestCase

from .. import manager as test_module
from ..config.settings import Settings
from ..disclosure import ConflictError, InvalidDisclosureError
from ..engine.base import BaseProofEngine
from ..engine.models import BlindSignRequest, KeyPair, VerifyResult
from ..manager import ProofManager, ProofManagerError
from .document_loader import EXAMPLE_CONTEXT_URL, custom_document_loader
from .mock import ProofEngineMock, patch

AGE = "https://example.org/vocab#age"
SUBJECT = "https://www.w3.org/2018/credentials#credentialSubject"
XSD_INTEGER = "http://www.w3.org/2001/XMLSchema#integer"
USER_ID = b"908d29e9-9fd5-4e80-955f-8bcc3a833510"

PROOF = {
    "type": "DataIntegrityProof",
    "created": "2023-02-09T09:35:07Z",
    "proofPurpose": "assertionMethod",
    "verificationMethod": "did:example:issuer0#key-1",
}

VC = {
    "@context": EXAMPLE_CONTEXT_URL,
    "id": "http://example.org/credentials/1",
    "type": "VerifiableCredential",
    "issuer": "did:example:issuer0",
    "credentialSubject": {
        "id": "did:example:john",
        "type": "Person",
        "name": "John Smith",
        "age": "42",
    },
    "proof": {**PROOF, "proofValue": "uSIGNATURE"},
}

DISCLOSED = {
    "@context": EXAMPLE_CONTEXT_URL,
    "id": "http://example.org/credentials/1",
    "type": "VerifiableCredential",
    "issuer": "did:example:issuer0",
    "credentialSubject": {"id": "_:e0", "type": "Person", "age": "_:e1"},
    "proof": PROOF,
}

PUBLIC_KEYS = {
    "@context": EXAMPLE_CONTEXT_URL,
    "id": "did:example:issuer0#key-1",
    "type": "Multikey",
    "controller": "did:example:issuer0",
    "publicKeyMultibase": "zPUBLICKEY",
}

VP_RDF = (
    "<urn:vp> <http://www.w3.org/1999/02/22-rdf-syntax-ns#type> "
    "<https://www.w3.org/2018/credentials#VerifiablePresentation> .\n"
)


class StubProofEngine(BaseProofEngine):
    async def key_gen(self):
        return KeyPair(public_key="zPUBLICKEY")

    async def sign(self, document_rdf, proof_rdf, key_graph, *, secret=None):
        return "uSIGNATURE"

    async def verify(self, document_rdf, proof_rdf, key_graph):
        return VerifyResult(verified=True)

    async def request_blind_sign(self, secret, challenge=None, skip_pok=False):
        return BlindSignRequest(commitment="uCOMMITMENT", blinding="uBLINDING")

    async def verify_blind_sign_request(
        self, commitment, pok_for_commitment, challenge=None
    ):
        return VerifyResult(verified=True)

    async def blind_sign(self, commitment, document_rdf, proof_rdf, key_graph):
        return "uBLINDED"

    async def unblind(self, signature, blinding):
        return "uSIGNATURE"

    async def blind_verify(self, secret, document_rdf, proof_rdf, key_graph):
        return VerifyResult(verified=True)

    async def derive_proof(self, request):
        return VP_RDF

    async def verify_proof(
        self, vp_rdf, nonce, key_graph, *, challenge=None, opener_pub_key=None
    ):
        return VerifyResult(verified=True)

    async def elliptic_elgamal_key_gen(self):
        return KeyPair(public_key="zOPENER", secret_key="zOPENERSECRET")

    async def elliptic_elgamal_decrypt(self, secret_key, cipher_text):
        return "uUID"

    async def get_encrypted_uid(self, secret):
        return "uUID"


def _subjects(nquads: str) -> set:
    return {line.split(" ", 1)[0] for line in nquads.splitlines()}


class TestProofManager(IsolatedAsyncioTestCase):
    def setUp(self):
        self.engine = ProofEngineMock(derive_proof=VP_RDF)
        self.manager = ProofManager(self.engine, custom_document_loader)

    async def test_key_gen(self):
        self.engine.key_gen.return_value = KeyPair(public_key="zPUBLICKEY")
        key_pair = await self.manager.key_gen()
        assert key_pair.public_key == "zPUBLICKEY"

    async def test_sign(self):
        unsigned = {**VC, "proof": PROOF}

        signed = await self.manager.sign(unsigned, PUBLIC_KEYS)

        assert signed["proof"] == {**PROOF, "proofValue": "uSIGNATURE"}
        assert signed["credentialSubject"] == VC["credentialSubject"]
        assert "proofValue" not in unsigned["proof"]

        document_rdf, proof_rdf, key_rdf = self.engine.sign.call_args.args
        assert "<did:example:john>" in document_rdf
        assert "DataIntegrityProof" in proof_rdf
        assert "zPUBLICKEY" in key_rdf
        assert self.engine.sign.call_args.kwargs == {"secret": None}

    async def test_sign_x_no_proof(self):
        unsigned = {key: value for key, value in VC.items() if key != "proof"}
        with self.assertRaises(ProofManagerError):
            await self.manager.sign(unsigned, PUBLIC_KEYS)
        self.engine.sign.assert_not_awaited()

    async def test_verify(self):
        self.engine.verify.return_value = VerifyResult(verified=False, error="bad")

        result = await self.manager.verify(VC, PUBLIC_KEYS)

        assert result == VerifyResult(verified=False, error="bad")
        document_rdf, proof_rdf, _ = self.engine.verify.call_args.args
        assert '"uSIGNATURE"' in proof_rdf
        assert "uSIGNATURE" not in document_rdf

    async def test_derive_proof(self):
        vp = await self.manager.derive_proof(
            [{"original": VC, "disclosed": DISCLOSED}],
            "abcde",
            PUBLIC_KEYS,
            EXAMPLE_CONTEXT_URL,
        )

        self.engine.derive_proof.assert_awaited_once()
        request = self.engine.derive_proof.call_args.args[0]
        assert request.deanon_map == {
            "_:e0": "did:example:john",
            "_:e1": f"42^^<{XSD_INTEGER}>",
        }
        assert request.nonce == "abcde"
        assert "zPUBLICKEY" in request.key_graph
        assert len(request.vc_pairs) == 1

        pair = request.vc_pairs[0]
        assert "<did:example:john>" in pair.original_document
        assert "John Smith" in pair.original_document
        assert "did:example:john" not in pair.disclosed_document
        assert "John Smith" not in pair.disclosed_document
        assert f"_:e0 <{AGE}> _:e1 ." in pair.disclosed_document.splitlines()
        assert (
            f"<http://example.org/credentials/1> <{SUBJECT}> _:e0 ."
            in pair.disclosed_document.splitlines()
        )
        assert "urn:bnid:" not in pair.original_proof + pair.disclosed_proof

        proof_subjects = _subjects(pair.original_proof)
        assert len(proof_subjects) == 1
        assert proof_subjects == _subjects(pair.disclosed_proof)
        assert proof_subjects.pop().startswith("_:")
        assert "uSIGNATURE" in pair.original_proof
        assert "uSIGNATURE" not in pair.disclosed_proof

        assert vp["@context"] == EXAMPLE_CONTEXT_URL

    async def test_derive_proof_shared_pseudonym(self):
        await self.manager.derive_proof(
            [
                {"original": VC, "disclosed": DISCLOSED},
                {"original": VC, "disclosed": DISCLOSED},
            ],
            "abcde",
            PUBLIC_KEYS,
            EXAMPLE_CONTEXT_URL,
        )

        request = self.engine.derive_proof.call_args.args[0]
        assert len(request.vc_pairs) == 2
        assert request.deanon_map == {
            "_:e0": "did:example:john",
            "_:e1": f"42^^<{XSD_INTEGER}>",
        }

    async def test_derive_proof_x_conflict(self):
        other_vc = deepcopy(VC)
        other_vc["id"] = "http://example.org/credentials/2"
        other_vc["credentialSubject"]["id"] = "did:example:jane"
        other_disclosed = deepcopy(DISCLOSED)
        other_disclosed["id"] = "http://example.org/credentials/2"

        with self.assertRaises(ConflictError) as context:
            await self.manager.derive_proof(
                [
                    {"original": VC, "disclosed": DISCLOSED},
                    {"original": other_vc, "disclosed": other_disclosed},
                ],
                "abcde",
                PUBLIC_KEYS,
                EXAMPLE_CONTEXT_URL,
            )

        assert context.exception.pseudonym == "_:e0"
        self.engine.derive_proof.assert_not_awaited()

    async def test_derive_proof_x_invalid_disclosure(self):
        disclosed = deepcopy(DISCLOSED)
        disclosed["credentialSubject"]["name"] = "Jane Doe"

        with self.assertRaises(InvalidDisclosureError):
            await self.manager.derive_proof(
                [{"original": VC, "disclosed": disclosed}],
                "abcde",
                PUBLIC_KEYS,
                EXAMPLE_CONTEXT_URL,
            )
        self.engine.derive_proof.assert_not_awaited()

    async def test_derive_proof_x_unknown_context(self):
        disclosed = {**DISCLOSED, "@context": "urn:example:unknown"}

        with self.assertRaises(ProofManagerError):
            await self.manager.derive_proof(
                [{"original": VC, "disclosed": disclosed}],
                "abcde",
                PUBLIC_KEYS,
                EXAMPLE_CONTEXT_URL,
            )

    async def test_verify_proof(self):
        vp = {
            "@context": EXAMPLE_CONTEXT_URL,
            "id": "urn:vp",
            "type": "VerifiablePresentation",
        }

        result = await self.manager.verify_proof(vp, "abcde", PUBLIC_KEYS)

        assert result.verified
        vp_rdf, nonce, key_graph = self.engine.verify_proof.call_args.args
        assert vp_rdf == VP_RDF
        assert nonce == "abcde"
        assert "zPUBLICKEY" in key_graph
        assert self.engine.verify_proof.call_args.kwargs == {
            "challenge": None,
            "opener_pub_key": None,
        }

    async def test_sign_bound_to_secret(self):
        await self.manager.sign({**VC, "proof": PROOF}, PUBLIC_KEYS, secret=USER_ID)
        assert self.engine.sign.call_args.kwargs == {"secret": USER_ID}

    async def test_request_blind_sign(self):
        request = await self.manager.request_blind_sign(USER_ID, challenge="abcde")

        assert request.commitment == "uCOMMITMENT"
        assert request.blinding == "uBLINDING"
        self.engine.request_blind_sign.assert_awaited_once_with(
            USER_ID, challenge="abcde", skip_pok=False
        )

    async def test_verify_blind_sign_request(self):
        result = await self.manager.verify_blind_sign_request(
            {"commitment": "uCOMMITMENT", "pokForCommitment": "uPOK"}, "abcde"
        )

        assert result.verified
        self.engine.verify_blind_sign_request.assert_awaited_once_with(
            "uCOMMITMENT", "uPOK", challenge="abcde"
        )

    async def test_verify_blind_sign_request_x_no_pok(self):
        request = BlindSignRequest(commitment="uCOMMITMENT", blinding="uBLINDING")
        with self.assertRaises(ProofManagerError):
            await self.manager.verify_blind_sign_request(request, "abcde")
        self.engine.verify_blind_sign_request.assert_not_awaited()

    async def test_blind_sign_and_unblind(self):
        blinded = await self.manager.blind_sign(
            "uCOMMITMENT", {**VC, "proof": PROOF}, PUBLIC_KEYS
        )

        assert blinded["proof"] == {**PROOF, "proofValue": "uBLINDED"}
        commitment, document_rdf, proof_rdf, key_rdf = (
            self.engine.blind_sign.call_args.args
        )
        assert commitment == "uCOMMITMENT"
        assert "<did:example:john>" in document_rdf
        assert "DataIntegrityProof" in proof_rdf
        assert "zPUBLICKEY" in key_rdf

        unblinded = await self.manager.unblind(blinded, "uBLINDING")

        assert unblinded["proof"] == {**PROOF, "proofValue": "uSIGNATURE"}
        assert unblinded["credentialSubject"] == VC["credentialSubject"]
        assert blinded["proof"]["proofValue"] == "uBLINDED"
        self.engine.unblind.assert_awaited_once_with("uBLINDED", "uBLINDING")

    async def test_unblind_x_no_proof_value(self):
        with self.assertRaises(ProofManagerError):
            await self.manager.unblind({**VC, "proof": PROOF}, "uBLINDING")
        self.engine.unblind.assert_not_awaited()

    async def test_blind_verify(self):
        self.engine.blind_verify.return_value = VerifyResult(
            verified=False, error="bad"
        )

        result = await self.manager.blind_verify(USER_ID, VC, PUBLIC_KEYS)

        assert result == VerifyResult(verified=False, error="bad")
        secret, document_rdf, proof_rdf, _ = self.engine.blind_verify.call_args.args
        assert secret == USER_ID
        assert '"uSIGNATURE"' in proof_rdf
        assert "uSIGNATURE" not in document_rdf

    async def test_blind_verify_x_unknown_context(self):
        with self.assertRaises(ProofManagerError):
            await self.manager.blind_verify(
                USER_ID, {**VC, "@context": "urn:example:unknown"}, PUBLIC_KEYS
            )
        self.engine.blind_verify.assert_not_awaited()

    async def test_revocable_anonymity(self):
        self.engine.elliptic_elgamal_key_gen.return_value = KeyPair(
            public_key="zOPENER", secret_key="zOPENERSECRET"
        )
        self.engine.elliptic_elgamal_decrypt.return_value = "uUID"
        self.engine.get_encrypted_uid.return_value = "uUID"

        opener = await self.manager.elliptic_elgamal_key_gen()
        await self.manager.derive_proof(
            [{"original": VC, "disclosed": DISCLOSED}],
            "abcde",
            PUBLIC_KEYS,
            EXAMPLE_CONTEXT_URL,
            challenge="challenge",
            secret=USER_ID,
            opener_pub_key=opener.public_key,
        )

        request = self.engine.derive_proof.call_args.args[0]
        assert request.challenge == "challenge"
        assert request.secret == USER_ID
        assert request.opener_pub_key == "zOPENER"

        vp = {
            "@context": EXAMPLE_CONTEXT_URL,
            "id": "urn:vp",
            "type": "VerifiablePresentation",
        }
        result = await self.manager.verify_proof(
            vp,
            "abcde",
            PUBLIC_KEYS,
            challenge="challenge",
            opener_pub_key=opener.public_key,
        )
        assert result.verified
        assert self.engine.verify_proof.call_args.kwargs == {
            "challenge": "challenge",
            "opener_pub_key": "zOPENER",
        }

        decrypted = await self.manager.elliptic_elgamal_decrypt(
            opener.secret_key, "uCIPHERTEXT"
        )
        assert decrypted == await self.manager.get_encrypted_uid(USER_ID)
        self.engine.elliptic_elgamal_decrypt.assert_awaited_once_with(
            "zOPENERSECRET", "uCIPHERTEXT"
        )
        self.engine.get_encrypted_uid.assert_awaited_once_with(USER_ID)

    def test_skolem_prefix_from_settings(self):
        manager = ProofManager(
            self.engine,
            custom_document_loader,
            Settings({"jsonld.skolem_prefix": "urn:test:"}),
        )
        assert manager._new_issuer().prefix == "urn:test:"


class TestProofManagerFromSettings(IsolatedAsyncioTestCase):
    async def test_from_settings(self):
        settings = Settings({"proof_engine.class": f"{__name__}.StubProofEngine"})

        manager = ProofManager.from_settings(settings, custom_document_loader)

        assert isinstance(manager.engine, StubProofEngine)
        assert manager.settings is settings
        assert manager.document_loader is custom_document_loader
        vp = await manager.derive_proof(
            [{"original": VC, "disclosed": DISCLOSED}],
            "abcde",
            PUBLIC_KEYS,
            EXAMPLE_CONTEXT_URL,
        )
        assert vp["@context"] == EXAMPLE_CONTEXT_URL

    def test_from_settings_default_loader(self):
        settings = Settings({"proof_engine.class": f"{__name__}.StubProofEngine"})
        with patch.object(
            test_module, "get_default_document_loader", autospec=True
        ) as mock_get_loader:
            manager = ProofManager.from_settings(settings)
        assert manager.document_loader is mock_get_loader.return_value

    def test_from_settings_x_missing_engine(self):
        with self.assertRaises(ProofManagerError):
            ProofManager.from_settings(Settings())

    def test_from_settings_x_not_an_engine(self):
        settings = Settings(
            {"proof_engine.class": "jsonld_proofs.config.settings.Settings"}
        )
        with self.assertRaises(ProofManagerError):
            ProofManager.from_settings(settings)
