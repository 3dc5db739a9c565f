from models import Medication, UserProfile
from prompt_builder import DOCUMENT_SEPARATOR, build_messages, build_prompt
import config


def test_prompt_is_deterministic(medication, profile, documents):
    first = build_prompt(medication, profile, documents)
    second = build_prompt(medication, profile, documents)
    assert first == second
    assert first.encode("utf-8") == second.encode("utf-8")


def test_prompt_embeds_ingredients_documents_and_profile(medication, profile, documents):
    prompt = build_prompt(medication, profile, documents)

    assert "Amoxicillin, Magnesium stearate, Gelatin" in prompt
    assert ("Type: PIL\nDo not take if allergic to penicillin."
            + DOCUMENT_SEPARATOR
            + "Type: PI\nContraindicated in penicillin hypersensitivity.") in prompt
    assert "- Allergies: Penicillin" in prompt
    assert "- Intolerances: lactose" in prompt
    assert "- Age: 34" in prompt
    assert "- Pregnant: no" in prompt
    assert "- Medical conditions: asthma" in prompt


def test_prompt_requests_json_shape(medication, profile, documents):
    prompt = build_prompt(medication, profile, documents)
    for key in ('"general_summary"', '"personalized_summary"', '"status"', '"source"'):
        assert key in prompt
    assert "safe|caution|danger" in prompt
    assert "cite" in prompt


def test_missing_profile_fields_are_explicit():
    med = Medication(id="m", name="Plain", ingredients=[])
    prompt = build_prompt(med, UserProfile(id="u"), [])

    assert "- Medication ingredients: none" in prompt
    assert "- Allergies: none" in prompt
    assert "- Intolerances: none" in prompt
    assert "- Age: unknown" in prompt
    assert "- Pregnant: no" in prompt
    assert "- Medical conditions: none" in prompt
    assert "none provided" in prompt


def test_pregnant_profile():
    med = Medication(id="m", name="Plain")
    prompt = build_prompt(med, UserProfile(id="u", is_pregnant=True, age=0), None)
    assert "- Pregnant: yes" in prompt
    assert "- Age: 0" in prompt


def test_build_messages_two_roles():
    messages = build_messages("PROMPT")
    assert messages == [
        {"role": "system", "content": config.SYSTEM_PERSONA},
        {"role": "user", "content": "PROMPT"},
    ]
