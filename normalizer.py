"""
Canonicalize free-text health terms

Purpose: turn user-entered allergy / intolerance / condition strings and medication ingredient names into one
comparable form, so that matching in rules_engine is a plain string comparison.

Input: a term or a list of terms (may be None).

Output: lower-case, trimmed strings. Every input maps to exactly one normalized form.

Example: "  Penicillin " -> "penicillin"; None -> []
"""
from typing import Iterable, List, Optional


def normalize_term(term) -> str:
    if term is None:
        return ""
    return str(term).strip().lower()


def normalize_terms(terms: Optional[Iterable]) -> List[str]:
    """Normalize every term, dropping ones that are blank after trimming. Order is kept."""
    if not terms:
        return []
    normalized = [normalize_term(t) for t in terms]
    return [t for t in normalized if t]


def dedupe_terms(terms: Optional[Iterable]) -> List[str]:
    """
    Remove case-insensitive duplicates while preserving order.

    The first spelling wins, so ["Peanut", "peanut ", "Soy"] -> ["Peanut", "Soy"].
    Values are trimmed but not lower-cased, the profile keeps what the user typed.
    """
    seen = set()
    unique = []
    for term in terms or []:
        key = normalize_term(term)
        if not key or key in seen:
            continue
        seen.add(key)
        unique.append(str(term).strip())
    return unique
