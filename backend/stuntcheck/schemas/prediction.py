"""
StuntCheck Gateway — Prediction Schemas
=========================================

What:  Request/response contracts for /api/predict and /api/predictions,
       plus the inference service contract.

Inference contract (fixed by the model server):
    request   {"gender": "male"|"female", "age": n, "height": n, "weight": n}
    response  {"status": str, "confidence": float,
               "nutrition_recommendation": str, "additional_info": any}

The four input fields are declared optional on purpose: a missing or null
field is reported by PredictionService with a single "all fields required"
message before the inference service is contacted. Type and range problems
(negative height, unknown gender label) are still rejected by the schema.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    Field,
    NonNegativeFloat,
    NonNegativeInt,
    PositiveFloat,
    PositiveInt,
    field_validator,
)

from stuntcheck.schemas.common import Gender, normalize_gender

# Integral values stay int: the model receives 24, not 24.0
NonNegativeNumber = Union[NonNegativeInt, NonNegativeFloat]
PositiveNumber = Union[PositiveInt, PositiveFloat]


class PredictRequest(BaseModel):
    gender: Optional[Gender] = Field(
        default=None, validation_alias=AliasChoices("gender", "sex")
    )
    age: Optional[NonNegativeNumber] = None
    height: Optional[PositiveNumber] = None
    weight: Optional[PositiveNumber] = None

    @field_validator("gender", mode="before")
    @classmethod
    def normalize_gender_label(cls, v):
        return normalize_gender(v)

    def missing_fields(self) -> List[str]:
        return [
            name
            for name in ("gender", "age", "height", "weight")
            if getattr(self, name) is None
        ]

    def inference_payload(self) -> Dict[str, Any]:
        """Body sent to the model server's /predict endpoint."""
        return {
            "gender": self.gender.value if self.gender else None,
            "age": self.age,
            "height": self.height,
            "weight": self.weight,
        }


class PredictAndSaveRequest(PredictRequest):
    child_id: Optional[uuid.UUID] = Field(
        default=None,
        description="Child profile this prediction belongs to (not ownership-checked)",
    )


class InferenceResult(BaseModel):
    """The structured outputs the gateway persists from an inference response."""
    status: str
    confidence: Optional[float] = None
    nutrition_recommendation: Optional[str] = None
    additional_info: Optional[Any] = None

    model_config = {"extra": "ignore"}


class PredictionResponse(BaseModel):
    id: uuid.UUID
    user_id: str
    child_id: Optional[uuid.UUID] = None
    gender: Gender
    age: float
    height: float
    weight: float
    status: str
    confidence: Optional[float] = None
    nutrition_recommendation: Optional[str] = None
    additional_info: Optional[Any] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class PredictionSaveResponse(BaseModel):
    message: str = "Prediction saved"
    prediction: PredictionResponse


class PredictionListResponse(BaseModel):
    predictions: List[PredictionResponse]


class InferenceStatusResponse(BaseModel):
    """Returned by the /api/checking-flask diagnostic probe."""
    status: str = "success"
    message: str = "Connected to the prediction service"
    inference_response: Any = None
