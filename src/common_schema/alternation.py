"""Alternation resolver: picks which alternative of an `or` subschema applies.

Alternatives are listed in order of preference, but an exact type match
always beats a coercible one regardless of position:

  1. Score every alternative with check_type_match().
  2. Scan scores EXACT -> COMPLEX. A tier with exactly one alternative wins.
     The first tier with two or more becomes the tie-break set.
  3. No alternative scored above NONE -> the first listed alternative.
  4. In the tie-break set, the first alternative that strictly validates,
  5. else the first that normalizes a copy of the value,
  6. else the first that normalizes a copy with unknown fields allowed,
  7. else the first member of the tie-break set.
"""

import copy
from typing import TYPE_CHECKING, Any

from loguru import logger

from common_schema.config import NormalizeOptions
from common_schema.errors import is_field_error, is_validation_error
from common_schema.schema_types.base import TypeMatch

if TYPE_CHECKING:
    from common_schema.schema import Schema


def _is_trial_failure(error: Exception) -> bool:
    return is_validation_error(error) or is_field_error(error)


def match_alternative(value: Any, subschema: dict, schema: "Schema") -> dict:
    """Return the alternative subschema that best matches value."""
    alternatives: list[dict] = subschema["alternatives"]

    # --- Group alternatives by score ---
    by_match: dict[TypeMatch, list[dict]] = {match: [] for match in TypeMatch}
    for alternative in alternatives:
        schema_type = schema.get_schema_type(alternative)
        score = TypeMatch(schema_type.check_type_match(value, alternative, schema))
        by_match[score].append(alternative)

    tiebreakers: list[dict] | None = None
    for match in (TypeMatch.EXACT, TypeMatch.COERCIBLE, TypeMatch.COMPLEX):
        candidates = by_match[match]
        if len(candidates) == 1:
            return candidates[0]
        if len(candidates) >= 2:
            tiebreakers = candidates
            break

    # --- No usable match ---
    # Trigger: every alternative scored NONE
    # Outcome: the first listed alternative, which reports the errors
    if tiebreakers is None:
        return alternatives[0]

    logger.debug(f"Breaking tie between {len(tiebreakers)} alternatives of {match.name} match")

    # --- Strict validation ---
    for alternative in tiebreakers:
        try:
            schema.create_subschema(alternative).validate(value)
            return alternative
        except Exception as e:
            if not _is_trial_failure(e):
                raise

    # --- Normalization on a copy ---
    for alternative in tiebreakers:
        try:
            schema.create_subschema(alternative).normalize(copy.deepcopy(value))
            return alternative
        except Exception as e:
            if not _is_trial_failure(e):
                raise

    # --- Normalization tolerating unknown fields ---
    relaxed = NormalizeOptions(allow_unknown_fields=True)
    for alternative in tiebreakers:
        try:
            schema.create_subschema(alternative).normalize(copy.deepcopy(value), options=relaxed)
            return alternative
        except Exception as e:
            if not _is_trial_failure(e):
                raise

    return tiebreakers[0]


def max_type_match(value: Any, subschema: dict, schema: "Schema") -> TypeMatch:
    """Best score any alternative gives value."""
    best = TypeMatch.NONE
    for alternative in subschema["alternatives"]:
        schema_type = schema.get_schema_type(alternative)
        best = max(best, TypeMatch(schema_type.check_type_match(value, alternative, schema)))
    return best
