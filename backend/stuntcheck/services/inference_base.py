"""
StuntCheck Gateway — Abstract Inference Service Interface
===========================================================

What:  Abstract base class defining the contract for prediction providers.
How:   Concrete implementations inherit from InferenceService and implement
       predict() and status().
Who:   Called by PredictionService and the diagnostic/health routes.

The production implementation (InferenceClient) talks to a remote model
server over HTTP. Tests substitute an in-memory implementation.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict

from stuntcheck.exceptions import InferenceServiceError


class InferenceService(ABC):
    """
    Abstract interface for stunting prediction.

    Contract:
        - predict() sends the four normalized inputs and returns the model's
          decoded JSON body unchanged, whatever its shape
        - every call is attempted exactly once: no retry, no backoff
        - any failure (transport, timeout, HTTP error status, non-JSON body)
          is raised as InferenceServiceError
    """

    @abstractmethod
    async def predict(self, features: Dict[str, Any]) -> Any:
        """
        Run one prediction.

        Args:
            features: {"gender": "male"|"female", "age": n, "height": n, "weight": n}

        Returns:
            The decoded inference response, normally an object such as
            {"status": "Stunted", "confidence": 0.91,
             "nutrition_recommendation": "...", "additional_info": {...}}

        Raises:
            InferenceServiceError: the call did not produce a usable answer.
        """
        ...

    @abstractmethod
    async def status(self) -> Any:
        """
        Probe the model server's status endpoint.

        Returns the decoded body (JSON when possible, text otherwise).
        Raises InferenceServiceError when the server cannot be reached.
        """
        ...

    async def health_check(self) -> bool:
        """True when status() answers, False otherwise. Never raises."""
        try:
            await self.status()
            return True
        except InferenceServiceError:
            return False
