"""Generic HTTP infrastructure."""

from workflow_transfer.infrastructure.http.client import (
    HttpClient,
    HttpClientStats,
    HttpRequestError,
    mask_secret,
)

__all__ = ["HttpClient", "HttpClientStats", "HttpRequestError", "mask_secret"]
