import pytest
from unittest.mock import MagicMock

from models import Medication, SupportingDocument, UserProfile


@pytest.fixture
def medication():
    return Medication(
        id="med-1",
        name="Amoxil 500",
        usage="Bacterial infections",
        dosage="1 capsule three times a day",
        ingredients=["Amoxicillin", "Magnesium stearate", "Gelatin"],
        safe_for_pregnant=True,
        safe_for_children=True,
        barcode="6001234567890",
    )


@pytest.fixture
def profile():
    return UserProfile(
        id="user-1",
        full_name="Sam Doe",
        allergies=["Penicillin"],
        intolerances=["lactose"],
        medical_conditions=["asthma"],
        age=34,
        is_pregnant=False,
    )


@pytest.fixture
def documents():
    return [
        SupportingDocument(id="doc-1", medication_id="med-1", type="PIL",
                           extracted_text="Do not take if allergic to penicillin."),
        SupportingDocument(id="doc-2", medication_id="med-1", type="PI",
                           extracted_text="Contraindicated in penicillin hypersensitivity."),
    ]


def completion_response(content, status_code=200):
    """Fake requests.Response for a chat-completions reply."""
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = {"choices": [{"message": {"role": "assistant", "content": content}}]}
    return response
