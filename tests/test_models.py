from models import AiAssessment, Medication, SafetyStatus, SupportingDocument, UserProfile


def test_profile_collapses_case_insensitive_duplicates():
    profile = UserProfile(id="u", allergies=["Peanut", "peanut", " PEANUT "], intolerances=None)
    assert profile.allergies == ["Peanut"]
    assert profile.intolerances == []
    assert profile.is_pregnant is None


def test_from_dict_tolerates_missing_lists():
    med = Medication.from_dict({"id": 7, "name": "Panado", "ingredients": None})
    assert med.id == "7"
    assert med.ingredients == []
    assert med.safe_for_pregnant is False

    profile = UserProfile.from_dict({"id": "u1"})
    assert profile.allergies == []
    assert profile.age is None

    doc = SupportingDocument.from_dict({"id": "d", "medication_id": "7", "type": "PIL", "extracted_text": None})
    assert doc.extracted_text == ""


def test_status_coerce():
    assert SafetyStatus.coerce("Danger", SafetyStatus.SAFE) is SafetyStatus.DANGER
    assert SafetyStatus.coerce("unsure", SafetyStatus.SAFE) is SafetyStatus.SAFE
    assert SafetyStatus.coerce(None, SafetyStatus.CAUTION) is SafetyStatus.CAUTION


def test_status_labels():
    assert SafetyStatus.SAFE.label == "Safe to use"
    assert SafetyStatus.CAUTION.label == "Use with caution"
    assert SafetyStatus.DANGER.label == "Allergic conflict"


def test_ai_assessment_to_dict_uses_plain_status():
    result = AiAssessment("G", "P", SafetyStatus.DANGER, "S")
    assert result.to_dict() == {
        "general_summary": "G",
        "personalized_summary": "P",
        "status": "danger",
        "source": "S",
    }
