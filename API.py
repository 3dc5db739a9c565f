from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn
from pydantic import BaseModel, Field
from typing import List, Optional
import logging

from log import configure_logging, log_assessment
from models import Medication, SupportingDocument, UserProfile
from rules_engine import assess_conflicts, highlight_ingredients
from llm_client import generate_ai_assessment

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI()

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class MedicationIn(BaseModel):
    id: str
    name: str
    usage: Optional[str] = None
    dosage: Optional[str] = None
    ingredients: List[str] = []
    safe_for_pregnant: bool = False
    safe_for_children: bool = False
    barcode: Optional[str] = None
    explanation: Optional[str] = None


class ProfileIn(BaseModel):
    id: str
    full_name: Optional[str] = None
    allergies: List[str] = []
    intolerances: List[str] = []
    medical_conditions: List[str] = []
    age: Optional[int] = Field(default=None, ge=0, le=120)
    is_pregnant: Optional[bool] = None


class DocumentIn(BaseModel):
    id: str
    medication_id: str
    type: str
    extracted_text: str = ""


class AssessRequest(BaseModel):
    medication: MedicationIn
    profile: ProfileIn
    documents: List[DocumentIn] = []


@app.post("/assess")
async def assess(request: AssessRequest):
    """
    Safety assessment for one medication and one user profile.

    Workflow:
    1. Conflict matcher compares allergies with ingredients (always runs)
    2. Ingredients that match the profile are highlighted
    3. If supporting documents were supplied, the LLM writes general + personalized summaries
    4. Both results are returned side by side; the UI decides how to merge them
    """
    medication = Medication.from_dict(request.medication.model_dump())
    profile = UserProfile.from_dict(request.profile.model_dump())
    documents = [SupportingDocument.from_dict(d.model_dump()) for d in request.documents]

    logger.info(f"📝 Assessing medication {medication.id} ({medication.name}) for profile {profile.id}")

    allergy = assess_conflicts(profile, medication)
    highlights = highlight_ingredients(profile, medication)
    log_assessment(medication.id, profile.id, "conflicts", allergy_status=allergy.status.value,
                   conflicts=allergy.conflicting_ingredients)

    ai = None
    if documents:
        logger.info(f"🤖 Generating AI summaries from {len(documents)} document(s)...")
        ai = await generate_ai_assessment(medication, profile, documents)
    else:
        logger.info("No supporting documents, skipping AI summaries")

    return {
        "medication_id": medication.id,
        "allergy": allergy.to_dict(),
        "status_label": allergy.status.label,
        "highlights": [
            {"ingredient": f.ingredient, "flagged": f.flagged, "matched_in": f.matched_in}
            for f in highlights
        ],
        "ai": ai.to_dict() if ai else None,
    }


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "ok", "service": "Medication Safety API"}


if __name__ == "__main__":
    uvicorn.run(
        "API:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
