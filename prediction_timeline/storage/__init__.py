"""Storage module for predictions kept on the hosted database service."""

from .db import (
    # Client
    PredictionStore,

    # Records
    Prediction,
    NewPrediction,

    # Errors
    StorageError,
    AlreadySubmittedError,
    TransientStorageError,
)

__all__ = [
    'PredictionStore',
    'Prediction',
    'NewPrediction',
    'StorageError',
    'AlreadySubmittedError',
    'TransientStorageError',
]
