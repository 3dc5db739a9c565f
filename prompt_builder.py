"""
Create a strict evidence block + task prompt

Purpose: format the medication's ingredients, its supporting document text and the user's profile into one
instruction that forces the LLM to answer from that data (or a cited source) and reply in a fixed JSON shape.

Input: Medication, UserProfile, list of SupportingDocument.

Output: prompt_text: str ready to send as the user message; build_messages() wraps it with the system persona.

Example: returns a prompt beginning with "You are a medical safety assistant..." followed by the ingredient list,
"Type: PIL\n<text>\n---\nType: PI\n<text>", the profile block, and the JSON response schema.

Notes: the output depends only on the arguments, so identical inputs give byte-identical prompts. Missing
profile fields are written out ("none", "unknown", "no") rather than dropped.
"""
from typing import Dict, List, Optional, Sequence

import config
from models import Medication, SupportingDocument, UserProfile

DOCUMENT_SEPARATOR = "\n---\n"

RESPONSE_SCHEMA = """{
  "general_summary": "...",
  "personalized_summary": "...",
  "status": "safe|caution|danger",
  "source": "..." (optional)
}"""


def _join(values: Optional[Sequence[str]], empty: str = "none") -> str:
    values = [v for v in (values or []) if v]
    return ", ".join(values) if values else empty


def format_documents(documents: Optional[Sequence[SupportingDocument]]) -> str:
    if not documents:
        return "none provided"
    return DOCUMENT_SEPARATOR.join(f"Type: {doc.type}\n{doc.extracted_text}" for doc in documents)


def format_profile(profile: Optional[UserProfile]) -> str:
    allergies = getattr(profile, "allergies", None)
    intolerances = getattr(profile, "intolerances", None)
    conditions = getattr(profile, "medical_conditions", None)
    age = getattr(profile, "age", None)
    pregnant = getattr(profile, "is_pregnant", None)

    return "\n".join([
        f"- Allergies: {_join(allergies)}",
        f"- Intolerances: {_join(intolerances)}",
        f"- Age: {age if age is not None else 'unknown'}",
        f"- Pregnant: {'yes' if pregnant else 'no'}",
        f"- Medical conditions: {_join(conditions)}",
    ])


# prompt_builder.py
def build_prompt(
    medication: Medication,
    profile: Optional[UserProfile],
    documents: Optional[Sequence[SupportingDocument]] = None,
) -> str:
    ingredients = _join(getattr(medication, "ingredients", None))

    return f"""You are a medical safety assistant for medications. ONLY use the provided ingredient list and document text for risk assessment. If you cannot find enough information, consult reputable, up-to-date medical sources and cite your source.

- Medication: {medication.name}
- Medication ingredients: {ingredients}
- Extracted document text:
{format_documents(documents)}

First, write a short general summary of the product and any general warnings/cautions (not personalized).

Second, given the user profile:
{format_profile(profile)}
Write a short personalized safety summary comparing the user's profile to the medication, and highlight any conflicts or risks. ONLY mention a risk if the ingredient or warning is present in the provided data or a reputable cited source. If there are no conflicts, say so in a positive way.

If you use information from an external source, cite the source (URL or publication).

Respond ONLY with valid JSON in this format:
{RESPONSE_SCHEMA}"""


def build_messages(prompt: str, system_prompt: Optional[str] = None) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": system_prompt or config.SYSTEM_PERSONA},
        {"role": "user", "content": prompt},
    ]
