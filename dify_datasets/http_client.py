"""
Dify HTTP client using httpx.

Provides a thin wrapper around httpx for making HTTP requests to the Dify
datasets API with timeout handling and error mapping. Requests are never
retried; every failure is raised to the caller.
"""

import logging
from typing import Any

import httpx

from .conf import DifyConfig
from .exceptions import (
    DifyAPIError,
    DifyConfigurationError,
    DifyConnectionError,
    DifyRateLimitError,
    DifyTimeoutError,
    DifyTransportError,
)

logger = logging.getLogger(__name__)


class DifyHttpClient:
    """
    HTTP client for the Dify datasets API.

    Handles authentication, timeouts, and error mapping for all HTTP
    interactions with Dify.
    """

    # Connection pool acquire timeout (in seconds)
    DEFAULT_POOL_TIMEOUT = 5.0

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        connect_timeout: float | None = None,
        read_timeout: float | None = None,
        write_timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize DifyHttpClient.

        Only the values not passed in are looked up through
        DifyConfig.from_settings().

        Args:
            base_url: Dify service API base URL (e.g. https://api.dify.ai/v1)
            api_key: Dataset API key
            connect_timeout: Connection timeout in seconds
            read_timeout: Read timeout in seconds
            write_timeout: Write timeout in seconds
            transport: Optional httpx transport (mainly for tests)

        Raises:
            DifyConfigurationError: If required configuration is missing
        """
        overrides = {"base_url": base_url, "api_key": api_key}
        for key, seconds in (
            ("connect_timeout_ms", connect_timeout),
            ("read_timeout_ms", read_timeout),
            ("write_timeout_ms", write_timeout),
        ):
            if seconds is not None:
                overrides[key] = max(1, round(seconds * 1000))
        config = DifyConfig.from_settings(**overrides)

        if not config.base_url:
            raise DifyConfigurationError(
                "Dify base URL is required", config_key="DIFY_BASE_URL"
            )

        self.base_url = config.base_url
        self.api_key = config.api_key

        # Timeout configuration
        self.connect_timeout = (
            connect_timeout if connect_timeout is not None else config.connect_timeout
        )
        self.read_timeout = (
            read_timeout if read_timeout is not None else config.read_timeout
        )
        self.write_timeout = (
            write_timeout if write_timeout is not None else config.write_timeout
        )

        self._transport = transport

        # Create httpx client (will be reused for connection pooling)
        self._client: httpx.Client | None = None

        logger.info(f"DifyHttpClient initialized with base_url: {self.base_url}")

    @classmethod
    def from_config(
        cls, config: DifyConfig, transport: httpx.BaseTransport | None = None
    ) -> "DifyHttpClient":
        """Create a client from an explicit DifyConfig."""
        return cls(
            base_url=config.base_url,
            api_key=config.api_key,
            connect_timeout=config.connect_timeout,
            read_timeout=config.read_timeout,
            write_timeout=config.write_timeout,
            transport=transport,
        )

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - close client."""
        self.close()

    def close(self):
        """Close the underlying httpx client."""
        if self._client:
            self._client.close()
            self._client = None

    @property
    def timeout(self) -> httpx.Timeout:
        return httpx.Timeout(
            connect=self.connect_timeout,
            read=self.read_timeout,
            write=self.write_timeout,
            pool=self.DEFAULT_POOL_TIMEOUT,
        )

    @property
    def client(self) -> httpx.Client:
        """Get or create the httpx client (lazy initialization)."""
        if self._client is None:
            self._client = httpx.Client(
                timeout=self.timeout,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    def _get_headers(self, extra_headers: dict = None) -> dict:
        """
        Get request headers with authentication.

        Args:
            extra_headers: Additional headers to include

        Returns:
            Headers dictionary
        """
        headers = {"Authorization": f"Bearer {self.api_key}"}

        if extra_headers:
            headers.update(extra_headers)

        return headers

    def _build_url(self, path: str) -> str:
        """
        Build full URL from path.

        Args:
            path: API path (should start with /)

        Returns:
            Full URL
        """
        if not path.startswith("/"):
            path = f"/{path}"
        return f"{self.base_url}{path}"

    def _handle_error_response(self, response: httpx.Response, operation: str = None):
        """
        Handle error HTTP responses and raise appropriate exceptions.

        Dify error bodies look like
        ``{"code": "invalid_param", "message": "...", "status": 400}``.

        Args:
            response: httpx Response object
            operation: Optional operation description for error context

        Raises:
            DifyRateLimitError: For 429 status
            DifyAPIError: For other error statuses
        """
        status_code = response.status_code

        # Try to parse error response
        try:
            data = response.json()
            if isinstance(data, dict):
                message = data.get("message") or response.text
                error_code = data.get("code")
            else:
                message = response.text
                error_code = None
        except ValueError:
            message = response.text or f"HTTP {status_code}"
            data = response.text or None
            error_code = None

        # Handle rate limiting
        if status_code == 429:
            retry_after = response.headers.get("Retry-After")
            retry_after = (
                int(retry_after) if retry_after and retry_after.isdigit() else None
            )
            raise DifyRateLimitError(
                message=message or "Rate limit exceeded",
                retry_after=retry_after,
                response_data=data,
                error_code=str(error_code) if error_code else None,
            )

        # Build error message
        error_msg = f"{operation}: {message}" if operation else message

        raise DifyAPIError(
            message=error_msg,
            status_code=status_code,
            response_data=data,
            error_code=str(error_code) if error_code else None,
        )

    def request(
        self,
        method: str,
        path: str,
        params: dict = None,
        json_data: Any = None,
        data: Any = None,
        files: dict = None,
        headers: dict = None,
        timeout: float = None,
    ) -> httpx.Response:
        """
        Make a single HTTP request.

        Args:
            method: HTTP method (GET, POST, PATCH, DELETE)
            path: API path (relative to base_url)
            params: Query parameters
            json_data: JSON body data
            data: Form data or raw body
            files: Files for multipart upload
            headers: Additional headers
            timeout: Override default read/write timeout

        Returns:
            httpx.Response object

        Raises:
            DifyConnectionError: For connection errors
            DifyTimeoutError: For timeout errors
            DifyRateLimitError: For rate limiting (429)
            DifyAPIError: For other API errors
        """
        url = self._build_url(path)
        headers = self._get_headers(headers)
        operation = f"{method} {path}"

        # Override timeout if specified
        if timeout is not None:
            request_timeout = httpx.Timeout(
                connect=self.connect_timeout,
                read=timeout,
                write=timeout,
                pool=self.DEFAULT_POOL_TIMEOUT,
            )
        else:
            request_timeout = httpx.USE_CLIENT_DEFAULT

        if params:
            params = {k: v for k, v in params.items() if v is not None}

        try:
            response = self.client.request(
                method=method,
                url=url,
                params=params,
                json=json_data,
                data=data,
                files=files,
                headers=headers,
                timeout=request_timeout,
            )
        except httpx.TimeoutException as e:
            raise DifyTimeoutError(
                f"Request timeout: {operation}",
                timeout=timeout or self.read_timeout,
                operation=operation,
            ) from e
        except httpx.TransportError as e:
            raise DifyConnectionError(
                f"Connection error: {operation}",
                base_url=self.base_url,
                cause=e,
            ) from e
        except httpx.RequestError as e:
            # Undecodable bodies, redirect loops
            raise DifyTransportError(
                f"Transport error: {operation}",
                details={"operation": operation, "error": str(e)},
            ) from e

        if not response.is_success:
            logger.warning(f"{operation} failed with status {response.status_code}")
            self._handle_error_response(response, operation)

        return response

    def get(
        self,
        path: str,
        params: dict = None,
        headers: dict = None,
        timeout: float = None,
    ) -> httpx.Response:
        """Make a GET request."""
        return self.request(
            "GET",
            path,
            params=params,
            headers=headers,
            timeout=timeout,
        )

    def post(
        self,
        path: str,
        json_data: Any = None,
        data: Any = None,
        params: dict = None,
        headers: dict = None,
        timeout: float = None,
    ) -> httpx.Response:
        """Make a POST request."""
        return self.request(
            "POST",
            path,
            params=params,
            json_data=json_data,
            data=data,
            headers=headers,
            timeout=timeout,
        )

    def patch(
        self,
        path: str,
        json_data: Any = None,
        params: dict = None,
        headers: dict = None,
        timeout: float = None,
    ) -> httpx.Response:
        """Make a PATCH request."""
        return self.request(
            "PATCH",
            path,
            params=params,
            json_data=json_data,
            headers=headers,
            timeout=timeout,
        )

    def delete(
        self,
        path: str,
        json_data: Any = None,
        params: dict = None,
        headers: dict = None,
        timeout: float = None,
    ) -> httpx.Response:
        """Make a DELETE request."""
        return self.request(
            "DELETE",
            path,
            params=params,
            json_data=json_data,
            headers=headers,
            timeout=timeout,
        )

    def upload(
        self,
        path: str,
        files: dict,
        data: dict = None,
        params: dict = None,
        headers: dict = None,
        timeout: float = None,
    ) -> httpx.Response:
        """
        Upload files using multipart/form-data.

        Args:
            path: API path
            files: Dictionary of files to upload {field_name: file_content or (filename, file_content)}
            data: Additional form fields (Dify expects the JSON settings in a ``data`` field)
            params: Query parameters
            headers: Additional headers
            timeout: Override default timeout

        Returns:
            httpx.Response object
        """
        return self.request(
            "POST",
            path,
            params=params,
            data=data,
            files=files,
            headers=headers,
            timeout=timeout,
        )
