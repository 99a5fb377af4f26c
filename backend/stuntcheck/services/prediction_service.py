"""
StuntCheck Gateway — Prediction Service (Predict-then-Persist Orchestrator)
============================================================================

What:  Anonymous prediction, authenticated predict-and-save, and the
       owner-scoped prediction history.
How:   Composes the inference client with single-table writes/reads on
       `predictions`.
Who:   Called by the /api/predict and /api/predictions route handlers.

Per-request state machine (predict-and-save):

    received → validated → inference-pending ─┬─ inference-failed → 500
                                              └─ inference-succeeded
                                                   → persist-pending ─┬─ persisted → 201
                                                                      └─ persist-failed → 400

    Nothing is retried. Inference and persistence are two separate external
    calls with no transaction spanning them: if the process dies in between,
    the prediction is lost.
"""

import logging
from typing import Any, List
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from stuntcheck.exceptions import (
    InferenceServiceError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from stuntcheck.models.prediction import Prediction
from stuntcheck.schemas.prediction import (
    InferenceResult,
    PredictAndSaveRequest,
    PredictionResponse,
    PredictRequest,
)
from stuntcheck.services.inference_client import inference_client

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "All fields (gender, age, height, weight) are required"


class PredictionService:
    """
    Business logic for predictions.

    Error Handling Strategy:
        - ValidationError before any inference call when an input is missing
        - InferenceServiceError (500, generic message) for any inference failure,
          including an answer that does not follow the inference contract
        - StoreError (400, store message) when persisting/reading fails
        - NotFoundError (404) for absent or foreign records
    """

    def _require_inputs(self, payload: PredictRequest) -> None:
        missing = payload.missing_fields()
        if missing:
            raise ValidationError(
                message=REQUIRED_FIELDS_MESSAGE,
                context={"missing": missing},
            )

    async def predict(self, payload: PredictRequest) -> Any:
        """
        Anonymous prediction. Returns the inference payload verbatim.

        Raises:
            ValidationError: an input is missing (inference never called)
            InferenceServiceError: the model server failed
        """
        self._require_inputs(payload)
        return await inference_client.predict(payload.inference_payload())

    async def predict_and_save(
        self,
        db: AsyncSession,
        owner_id: str,
        payload: PredictAndSaveRequest,
    ) -> PredictionResponse:
        """
        Runs a prediction and stores it for `owner_id`.

        `payload.child_id` is stored as given. Its ownership is not checked;
        the database foreign key only rejects children that do not exist.
        """
        self._require_inputs(payload)

        raw = await inference_client.predict(payload.inference_payload())
        try:
            outputs = InferenceResult.model_validate(raw)
        except PydanticValidationError as e:
            logger.error("Inference payload does not follow the contract: %s", str(e))
            raise InferenceServiceError(context={"error_type": "contract_mismatch"})

        prediction = Prediction(
            user_id=owner_id,
            child_id=payload.child_id,
            gender=payload.gender.value,
            age=payload.age,
            height=payload.height,
            weight=payload.weight,
            status=outputs.status,
            confidence=outputs.confidence,
            nutrition_recommendation=outputs.nutrition_recommendation,
            additional_info=outputs.additional_info,
        )
        try:
            db.add(prediction)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Error saving prediction for %s: %s", owner_id, str(e))
            raise StoreError.from_exception(e)

        logger.info(
            "Prediction %s saved for %s (status=%s, child=%s)",
            prediction.id,
            owner_id,
            prediction.status,
            prediction.child_id,
        )
        return PredictionResponse.model_validate(prediction)

    async def list_predictions(self, db: AsyncSession, owner_id: str) -> List[PredictionResponse]:
        """Prediction history of `owner_id`, newest first."""
        try:
            result = await db.execute(
                select(Prediction)
                .where(Prediction.user_id == owner_id)
                .order_by(desc(Prediction.created_at))
            )
            predictions = list(result.scalars().all())
        except SQLAlchemyError as e:
            raise StoreError.from_exception(e)
        return [PredictionResponse.model_validate(p) for p in predictions]

    async def _get_owned(
        self, db: AsyncSession, owner_id: str, prediction_id: UUID
    ) -> Prediction:
        result = await db.execute(
            select(Prediction).where(
                Prediction.id == prediction_id,
                Prediction.user_id == owner_id,
            )
        )
        prediction = result.scalar_one_or_none()
        if prediction is None:
            raise NotFoundError(resource="prediction", resource_id=str(prediction_id))
        return prediction

    async def get_prediction(
        self, db: AsyncSession, owner_id: str, prediction_id: UUID
    ) -> PredictionResponse:
        try:
            prediction = await self._get_owned(db, owner_id, prediction_id)
        except SQLAlchemyError as e:
            raise StoreError.from_exception(e)
        return PredictionResponse.model_validate(prediction)

    async def delete_prediction(
        self, db: AsyncSession, owner_id: str, prediction_id: UUID
    ) -> None:
        try:
            prediction = await self._get_owned(db, owner_id, prediction_id)
            await db.delete(prediction)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Failed to delete prediction %s: %s", prediction_id, str(e))
            raise StoreError.from_exception(e)
        logger.info("Prediction %s deleted", prediction_id)


# ── Singleton Instance ────────────────────────────────────────────────────
prediction_service = PredictionService()
