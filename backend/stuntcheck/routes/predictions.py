"""
StuntCheck Gateway — Prediction Route Handlers
================================================

What:  POST /api/predict (anonymous), POST/GET /api/predictions and
       GET/DELETE /api/predictions/{id} (authenticated).
How:   Thin handlers around PredictionService.

Request Flow (POST /api/predictions):
    1. get_current_principal → 401 when no verified token
    2. Schema validation of the four inputs (+ optional child_id)
    3. PredictionService: inference call, then insert
    4. 201 with the stored record
"""

import logging
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from stuntcheck.database import get_db_session
from stuntcheck.dependencies import get_current_principal
from stuntcheck.schemas.auth import Identity
from stuntcheck.schemas.common import ErrorResponse, MessageResponse
from stuntcheck.schemas.prediction import (
    PredictAndSaveRequest,
    PredictionListResponse,
    PredictionResponse,
    PredictionSaveResponse,
    PredictRequest,
)
from stuntcheck.services.prediction_service import prediction_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Predictions"])


@router.post(
    "/predict",
    responses={
        200: {"description": "Inference payload, unchanged"},
        400: {"description": "Missing or invalid input", "model": ErrorResponse},
        500: {"description": "Prediction model unreachable", "model": ErrorResponse},
    },
    summary="Predict stunting without logging in",
    description="Sends the inputs to the prediction model and returns its answer verbatim. Nothing is stored.",
)
async def predict(payload: PredictRequest) -> Any:
    return await prediction_service.predict(payload)


@router.post(
    "/predictions",
    status_code=201,
    response_model=PredictionSaveResponse,
    responses={
        400: {"description": "Missing input or store error", "model": ErrorResponse},
        401: {"description": "Missing or invalid bearer token", "model": ErrorResponse},
        500: {"description": "Prediction model unreachable", "model": ErrorResponse},
    },
    summary="Predict and save the result",
)
async def create_prediction(
    payload: PredictAndSaveRequest,
    principal: Identity = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db_session),
) -> PredictionSaveResponse:
    prediction = await prediction_service.predict_and_save(db, principal.id, payload)
    return PredictionSaveResponse(prediction=prediction)


@router.get(
    "/predictions",
    response_model=PredictionListResponse,
    responses={401: {"description": "Unauthorized", "model": ErrorResponse}},
    summary="Get my prediction history, newest first",
)
async def list_predictions(
    response: Response,
    principal: Identity = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db_session),
) -> PredictionListResponse:
    predictions = await prediction_service.list_predictions(db, principal.id)
    response.headers["X-Total-Count"] = str(len(predictions))
    return PredictionListResponse(predictions=predictions)


@router.get(
    "/predictions/{prediction_id}",
    response_model=PredictionResponse,
    responses={
        401: {"description": "Unauthorized", "model": ErrorResponse},
        404: {"description": "Prediction not found", "model": ErrorResponse},
    },
    summary="Get one of my predictions",
)
async def get_prediction(
    prediction_id: UUID,
    principal: Identity = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db_session),
) -> PredictionResponse:
    return await prediction_service.get_prediction(db, principal.id, prediction_id)


@router.delete(
    "/predictions/{prediction_id}",
    response_model=MessageResponse,
    responses={
        401: {"description": "Unauthorized", "model": ErrorResponse},
        404: {"description": "Prediction not found", "model": ErrorResponse},
    },
    summary="Delete one of my predictions",
)
async def delete_prediction(
    prediction_id: UUID,
    principal: Identity = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await prediction_service.delete_prediction(db, principal.id, prediction_id)
    return MessageResponse(message="Prediction deleted")
