"""
Shared types for the safety assessment engine.

Inputs (Medication, UserProfile, SupportingDocument) come from the backing store as
snake_case rows and are read-only here. Outputs (AllergyAssessment, AiAssessment) are
recomputed on every call and never persisted.
"""
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from normalizer import dedupe_terms


class SafetyStatus(str, Enum):
    SAFE = "safe"
    CAUTION = "caution"
    DANGER = "danger"

    @property
    def label(self) -> str:
        """Default badge text shown next to the status."""
        return _STATUS_LABELS[self]

    @classmethod
    def coerce(cls, value: Any, default: "SafetyStatus") -> "SafetyStatus":
        """Map a loosely-typed value ("Danger", None, 3) to a status, or return default."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                return default
        return default


_STATUS_LABELS = {
    SafetyStatus.SAFE: "Safe to use",
    SafetyStatus.CAUTION: "Use with caution",
    SafetyStatus.DANGER: "Allergic conflict",
}


@dataclass
class Medication:
    """A drug product as stored in the medications table."""
    id: str
    name: str
    usage: Optional[str] = None
    dosage: Optional[str] = None
    ingredients: List[str] = field(default_factory=list)
    safe_for_pregnant: bool = False
    safe_for_children: bool = False
    barcode: Optional[str] = None
    explanation: Optional[str] = None

    def __post_init__(self):
        self.ingredients = list(self.ingredients or [])

    @classmethod
    def from_dict(cls, row: Dict[str, Any]) -> "Medication":
        return cls(
            id=str(row["id"]),
            name=row.get("name") or "",
            usage=row.get("usage"),
            dosage=row.get("dosage"),
            ingredients=row.get("ingredients") or [],
            safe_for_pregnant=bool(row.get("safe_for_pregnant")),
            safe_for_children=bool(row.get("safe_for_children")),
            barcode=row.get("barcode"),
            explanation=row.get("explanation"),
        )


@dataclass
class UserProfile:
    """
    Snapshot of one user's self-reported health attributes.

    allergies, intolerances and medical_conditions behave like case-insensitive sets:
    duplicates collapse on construction, keeping the first spelling and the order entered.
    is_pregnant is tri-state, None means unknown.
    """
    id: str
    full_name: Optional[str] = None
    allergies: List[str] = field(default_factory=list)
    intolerances: List[str] = field(default_factory=list)
    medical_conditions: List[str] = field(default_factory=list)
    age: Optional[int] = None
    is_pregnant: Optional[bool] = None

    def __post_init__(self):
        self.allergies = dedupe_terms(self.allergies)
        self.intolerances = dedupe_terms(self.intolerances)
        self.medical_conditions = dedupe_terms(self.medical_conditions)

    @classmethod
    def from_dict(cls, row: Dict[str, Any]) -> "UserProfile":
        return cls(
            id=str(row["id"]),
            full_name=row.get("full_name"),
            allergies=row.get("allergies") or [],
            intolerances=row.get("intolerances") or [],
            medical_conditions=row.get("medical_conditions") or [],
            age=row.get("age"),
            is_pregnant=row.get("is_pregnant"),
        )


@dataclass
class SupportingDocument:
    """Package insert / label text linked to a medication."""
    id: str
    medication_id: str
    type: str
    extracted_text: str = ""

    @classmethod
    def from_dict(cls, row: Dict[str, Any]) -> "SupportingDocument":
        return cls(
            id=str(row["id"]),
            medication_id=str(row["medication_id"]),
            type=row.get("type") or "",
            extracted_text=row.get("extracted_text") or "",
        )


@dataclass
class AllergyAssessment:
    status: SafetyStatus
    conflicting_ingredients: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"status": self.status.value, "conflicting_ingredients": list(self.conflicting_ingredients)}


@dataclass
class AiAssessment:
    general_summary: str
    personalized_summary: str
    status: SafetyStatus
    source: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        return data


@dataclass
class IngredientFlag:
    """One ingredient chip: flagged when it exactly matches something in the profile."""
    ingredient: str
    flagged: bool
    matched_in: List[str] = field(default_factory=list)  # "allergies", "intolerances", "medical_conditions"


# Tagged result of parsing a completion. The fallback for "malformed" lives in parser.to_assessment.

@dataclass
class ParsedOk:
    value: AiAssessment
    kind: Literal["ok"] = "ok"


@dataclass
class Malformed:
    raw_text: str
    kind: Literal["malformed"] = "malformed"


ParsedAiResponse = Union[ParsedOk, Malformed]
