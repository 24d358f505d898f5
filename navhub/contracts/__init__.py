"""Standardized API contracts and error types."""

from .errors import ConfigFetchError, ErrorCode
from .responses import ApiEnvelope, ApiErrorModel, ApiMetaModel, fail, ok

__all__ = [
    "ApiEnvelope",
    "ApiErrorModel",
    "ApiMetaModel",
    "ConfigFetchError",
    "ErrorCode",
    "fail",
    "ok",
]
