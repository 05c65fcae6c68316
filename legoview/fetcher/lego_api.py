"""Acquisition client for the LEGO deals and Vinted sales API.

GET /deals?page=&size=          current catalog deals
GET /sales?id=&page=&size=      marketplace sales for one LEGO set id

Both answer {"success": bool, "data": {"result": [...], "meta": {...}}}.
"""

import asyncio
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx

from legoview.fetcher.http_client import AsyncHTTPClient
from legoview.fetcher.retry_handler import RetryPolicy
from legoview.models.data_models import AcquisitionResult, Mode
from legoview.models.errors import AcquisitionFailure
from legoview.monitoring.logger import StructuredLogger


class LegoApiClient:
    """
    Fetches deal and sale pages.
    
    fetch_records never raises for network, HTTP or payload problems: it
    logs them and returns an empty-shaped AcquisitionResult, which the
    record store turns into the degraded empty view.
    """
    
    def __init__(
        self,
        http_client: AsyncHTTPClient,
        retry_policy: Optional[RetryPolicy] = None,
        logger: Optional[StructuredLogger] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        """
        Initialize client.
        
        Args:
            http_client: Entered AsyncHTTPClient
            retry_policy: Backoff policy for transient failures
            logger: Optional structured logger
            sleep: Awaitable used between retries (patched in tests)
        """
        self.http_client = http_client
        self.retry_policy = retry_policy or RetryPolicy()
        self.logger = logger
        self._sleep = sleep
    
    async def fetch_deals(self, page: int = 1, size: int = 6) -> AcquisitionResult:
        return await self._fetch("/deals", {"page": page, "size": size})
    
    async def fetch_sales(self, set_id: str, page: int = 1, size: int = 6) -> AcquisitionResult:
        return await self._fetch("/sales", {"id": set_id, "page": page, "size": size})
    
    async def fetch_records(
        self,
        mode: Mode,
        set_id: Optional[str],
        page: int,
        size: int
    ) -> AcquisitionResult:
        """Fetch deals, or the sales of set_id in SALE mode."""
        if mode is Mode.SALE:
            if not set_id:
                return self._failure("/sales", None, "sales acquisition requires a set id")
            return await self.fetch_sales(set_id, page, size)
        return await self.fetch_deals(page, size)
    
    async def _fetch(self, path: str, params: Dict[str, Any]) -> AcquisitionResult:
        for attempt in range(self.retry_policy.max_retries):
            try:
                body = await self.http_client.get_json(path, params=params)
                return self._unwrap(path, body)
                
            except httpx.HTTPStatusError as e:
                status_code = e.response.status_code
                if self.retry_policy.should_retry(attempt, status_code=status_code):
                    await self._backoff(path, status_code, attempt)
                    continue
                return self._failure(path, status_code, str(e))
                
            except httpx.TimeoutException as e:
                if self.retry_policy.should_retry(attempt, is_timeout=True):
                    await self._backoff(path, None, attempt)
                    continue
                return self._failure(path, None, f"timeout: {e}")
                
            except (httpx.RequestError, ValueError) as e:
                # Connection refused, DNS, invalid JSON
                return self._failure(path, None, str(e))
                
            except AcquisitionFailure as e:
                return self._failure(path, None, str(e))
        
        return self._failure(path, None, "retries exhausted")
    
    def _unwrap(self, path: str, body: Any) -> AcquisitionResult:
        """
        Extract result and meta from an API body.
        
        Structural validation of the records is left to the record store;
        only an explicit failure flag is treated as an acquisition failure.
        """
        if not isinstance(body, dict):
            raise AcquisitionFailure(f"unexpected body type {type(body).__name__}")
        if body.get("success") is not True:
            raise AcquisitionFailure(f"API returned success={body.get('success')!r}")
        
        data = body.get("data")
        if isinstance(data, dict):
            return AcquisitionResult(data=data.get("result"), meta=data.get("meta"))
        return AcquisitionResult(data=data, meta=body.get("meta"))
    
    async def _backoff(self, path: str, status_code: Optional[int], attempt: int) -> None:
        delay = self.retry_policy.delay(attempt)
        if self.logger:
            self.logger.acquisition_retry(url=path, status=status_code, attempt=attempt, delay=delay)
        await self._sleep(delay)
    
    def _failure(self, path: str, status_code: Optional[int], error: str) -> AcquisitionResult:
        if self.logger:
            self.logger.acquisition_failure(url=path, status=status_code, error=error)
        return AcquisitionResult.failed(error)
