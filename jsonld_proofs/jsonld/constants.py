"""JSON-LD, Linked Data Proof and Verifiable Credential constants."""

CREDENTIALS_CONTEXT_V1_URL = "https://www.w3.org/2018/credentials/v1"
CREDENTIALS_CONTEXT_V2_URL = "https://www.w3.org/ns/credentials/v2"

SECURITY_PROOF_URL = "https://w3id.org/security#proof"
SECURITY_PROOF_VALUE_URL = "https://w3id.org/security#proofValue"

VERIFIABLE_CREDENTIAL_TYPE = "VerifiableCredential"
VERIFIABLE_PRESENTATION_TYPE = "VerifiablePresentation"

EXPANDED_TYPE_CREDENTIALS_CONTEXT_V1_VC_TYPE = (
    "https://www.w3.org/2018/credentials#VerifiableCredential"
)
EXPANDED_TYPE_CREDENTIALS_CONTEXT_V1_VP_TYPE = (
    "https://www.w3.org/2018/credentials#VerifiablePresentation"
)

NQUADS_FORMAT = "application/n-quads"
