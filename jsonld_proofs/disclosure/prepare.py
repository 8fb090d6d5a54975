"""Prepare one credential pair for proof derivation."""

import copy
from typing import Tuple, Union

from .diff import DeanonMap, diff_vc
from .rewrite import apply_masking
from .skolem import SkolemIssuer


def diff_and_prepare(
    original: Union[dict, list], disclosed: Union[dict, list], issuer: SkolemIssuer
) -> Tuple[DeanonMap, Union[dict, list]]:
    """Compare a credential pair and rewrite the disclosed credential.

    Args:
        original: Skolemized expanded credential
        disclosed: Expanded disclosed credential, left untouched
        issuer: Skolem issuer of the current operation

    Returns:
        The pair's deanonymization map, to be merged into the presentation-wide
        map, and the rewritten copy of the disclosed credential

    """
    diff = diff_vc(original, disclosed, issuer)
    edited = copy.deepcopy(disclosed)
    deanon_delta = apply_masking(edited, diff)
    return deanon_delta, edited
