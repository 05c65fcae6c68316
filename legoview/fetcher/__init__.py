"""Acquisition of deal and sale batches from the LEGO API."""

from .http_client import AsyncHTTPClient
from .lego_api import LegoApiClient
from .retry_handler import RetryPolicy

__all__ = ["AsyncHTTPClient", "LegoApiClient", "RetryPolicy"]
