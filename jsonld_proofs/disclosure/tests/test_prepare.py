from copy import deepcopy
from unittest import TestCase

from ..prepare import diff_and_prepare
from ..skolem import SkolemIssuer, skolemize

EX = "https://example.org/vocab#"
NAME = EX + "name"
AGE = EX + "age"
KNOWS = EX + "knows"
XSD_INTEGER = "http://www.w3.org/2001/XMLSchema#integer"

ORIGINAL = [
    {
        "@id": "did:example:john",
        NAME: [{"@value": "John Smith"}],
        AGE: [{"@value": "42", "@type": XSD_INTEGER}],
        KNOWS: [{NAME: [{"@value": "Jane"}]}],
    }
]


class TestDiffAndPrepare(TestCase):
    def test_prepare(self):
        issuer = SkolemIssuer()
        original = skolemize(ORIGINAL, issuer)
        disclosed = [
            {
                "@id": "_:e0",
                AGE: [{"@value": "_:e1", "@type": XSD_INTEGER}],
                KNOWS: [{}],
            }
        ]
        disclosed_before = deepcopy(disclosed)

        deanon_delta, edited = diff_and_prepare(original, disclosed, issuer)

        assert disclosed == disclosed_before
        assert deanon_delta == {
            "_:e0": "did:example:john",
            "_:e1": f"42^^<{XSD_INTEGER}>",
        }
        assert edited == [
            {
                "@id": "urn:bnid:e0",
                AGE: [{"@id": "urn:bnid:e1"}],
                KNOWS: [{"@id": original[0][KNOWS][0]["@id"]}],
            }
        ]
