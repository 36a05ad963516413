"""Candidate generation for hierarchical sprite fallback.

Maps an attribute triple to the fixed, ordered list of sprite identities
tried by the cache. The order is part of the asset naming contract:

    1. vegetation-climate-height
    2. vegetation-height
    3. vegetation-climate
    4. vegetation
    5. height
    6. climate
    7. fallback sentinel

A climate-height pair is never produced.
"""

from typing import Sequence

from .models import FALLBACK_CANDIDATE, Candidate, CandidateList, TerrainAttributes

CANDIDATE_COUNT = 7


class MalformedCandidateListError(RuntimeError):
    """Raised when a generated candidate list breaks its shape invariant."""
    pass


def generate_candidates(attributes: TerrainAttributes) -> CandidateList:
    """Return the 7-entry candidate list for an attribute triple, most specific first.

    ``vegetation = none`` is kept literally; skipping it is a naming policy
    (see ``SpriteNaming``).
    """
    v = attributes.vegetation.value
    c = attributes.climate.value
    h = attributes.height.value
    return (
        Candidate((v, c, h)),
        Candidate((v, h)),
        Candidate((v, c)),
        Candidate((v,)),
        Candidate((h,)),
        Candidate((c,)),
        FALLBACK_CANDIDATE,
    )


def validate_candidates(candidates: Sequence[Candidate]) -> None:
    """Check the candidate list shape.

    Args:
        candidates: List produced by ``generate_candidates``

    Raises:
        MalformedCandidateListError: If the list does not hold exactly six
            unique real candidates followed by the fallback sentinel
    """
    if len(candidates) != CANDIDATE_COUNT:
        raise MalformedCandidateListError(
            f"Expected {CANDIDATE_COUNT} candidates, got {len(candidates)}"
        )
    if not candidates[-1].is_fallback:
        raise MalformedCandidateListError(
            f"Last candidate must be the fallback sentinel, got {candidates[-1]}"
        )
    real = candidates[:-1]
    if any(candidate.is_fallback for candidate in real):
        raise MalformedCandidateListError("Fallback sentinel found before the end of the list")
    if len(set(real)) != len(real):
        raise MalformedCandidateListError(
            f"Duplicate candidates: {[str(c) for c in real]}"
        )
