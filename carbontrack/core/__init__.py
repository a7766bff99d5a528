# core/__init__.py
# Re-exports the prediction error taxonomy for convenience
from .errors import (
    ConfigurationError,
    InvalidInput,
    PaymentRequired,
    PredictionError,
    RateLimited,
    UpstreamError,
)

__all__ = [
    'ConfigurationError',
    'InvalidInput',
    'PaymentRequired',
    'PredictionError',
    'RateLimited',
    'UpstreamError',
]
