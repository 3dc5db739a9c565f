"""
Deterministic safety checks

Purpose: apply hard rules independent of the LLM: compare the user's declared allergies against the medication's
ingredient list, and mark ingredients that appear anywhere in the user's profile.

Input: UserProfile, Medication.

Output: AllergyAssessment(status, conflicting_ingredients) and a list of IngredientFlag.

Example: allergies ["peanut"], ingredients ["peanut oil", "starch"] -> caution, ["peanut oil"]

Notes: always run and surface these results even if the LLM does not mention them. Both functions are pure
and never raise on missing/empty lists.
"""
from typing import List

from models import AllergyAssessment, IngredientFlag, Medication, SafetyStatus, UserProfile
from normalizer import normalize_term, normalize_terms


# rules_engine.py
def assess_conflicts(profile: UserProfile, medication: Medication) -> AllergyAssessment:
    """
    Match allergies against ingredients by bidirectional substring containment.

    An ingredient equal to an allergy (after normalization) is an exact match, one that only
    contains or is contained by an allergy is a partial match. Exact matches win: if any exist
    the status is danger and partial matches are left out of the report. Otherwise any partial
    match gives caution. Reported ingredients are normalized and keep the medication's order.
    """
    allergies = normalize_terms(getattr(profile, "allergies", None))
    if not allergies:
        return AllergyAssessment(status=SafetyStatus.SAFE, conflicting_ingredients=[])

    # Blank ingredients are kept: "" is contained in every allergy.
    ingredients = [normalize_term(i) for i in getattr(medication, "ingredients", None) or []]

    exact_matches: List[str] = []
    partial_matches: List[str] = []

    for ingredient in ingredients:
        related = [a for a in allergies if ingredient in a or a in ingredient]
        if not related:
            continue
        if ingredient in related:
            exact_matches.append(ingredient)
        else:
            partial_matches.append(ingredient)

    if exact_matches:
        return AllergyAssessment(status=SafetyStatus.DANGER, conflicting_ingredients=exact_matches)
    if partial_matches:
        return AllergyAssessment(status=SafetyStatus.CAUTION, conflicting_ingredients=partial_matches)
    return AllergyAssessment(status=SafetyStatus.SAFE, conflicting_ingredients=[])


_PROFILE_FIELDS = ("allergies", "intolerances", "medical_conditions")


def highlight_ingredients(profile: UserProfile, medication: Medication) -> List[IngredientFlag]:
    """
    Flag each ingredient that exactly (case-insensitively) matches an allergy, intolerance or
    medical condition. Unlike assess_conflicts this keeps the ingredient as written and
    returns every ingredient, flagged or not.
    """
    profile_terms = {
        name: set(normalize_terms(getattr(profile, name, None))) for name in _PROFILE_FIELDS
    }

    flags = []
    for ingredient in getattr(medication, "ingredients", None) or []:
        key = normalize_term(ingredient)
        matched_in = [name for name in _PROFILE_FIELDS if key and key in profile_terms[name]]
        flags.append(IngredientFlag(ingredient=ingredient, flagged=bool(matched_in), matched_in=matched_in))
    return flags
