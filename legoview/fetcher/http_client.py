"""Async HTTP client wrapper with timeout configuration."""

from typing import Any, Dict, Optional

import httpx


class AsyncHTTPClient:
    """
    Async HTTP client wrapper around httpx.AsyncClient.
    
    Provides:
    - A base URL shared by the deals and sales endpoints
    - Configurable connect and read timeouts
    - Context manager for proper lifecycle management
    """
    
    def __init__(
        self,
        base_url: str = "",
        connect_timeout: float = 3.0,
        read_timeout: float = 8.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize HTTP client.
        
        Args:
            base_url: Prefix for relative request paths
            connect_timeout: Connection timeout in seconds
            read_timeout: Read timeout in seconds
            transport: Optional transport override (mock or ASGI transports in tests)
        """
        self.base_url = base_url
        self.connect_timeout = connect_timeout
        self.read_timeout = read_timeout
        self.transport = transport
        self._client: Optional[httpx.AsyncClient] = None
    
    async def __aenter__(self):
        """Enter async context manager."""
        timeout = httpx.Timeout(
            self.read_timeout,
            connect=self.connect_timeout,
        )
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=self.transport,
            headers={"Accept": "application/json"},
        )
        return self
    
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Exit async context manager."""
        if self._client:
            await self._client.aclose()
            self._client = None
    
    async def get_json(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None
    ) -> Any:
        """
        GET a path and decode the JSON body.
        
        Raises:
            RuntimeError: If used outside the context manager
            httpx.HTTPStatusError: On 4xx/5xx responses
            httpx.TransportError: On network failures and timeouts
            ValueError: If the body is not valid JSON
        """
        if not self._client:
            raise RuntimeError("Client not initialized. Use 'async with' context manager.")
        
        response = await self._client.get(path, params=params)
        response.raise_for_status()
        return response.json()
