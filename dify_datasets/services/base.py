import logging
from typing import TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from ..exceptions import DifyError, DifySerializationError, DifyValidationError
from ..http_client import DifyHttpClient

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class DifyServiceBase:
    """
    Base service for Dify dataset operations.
    """

    def __init__(self, http_client: DifyHttpClient = None):
        """
        Initialize the service.

        Args:
            http_client: DifyHttpClient instance (created from settings if not provided)
        """
        self.http_client = http_client or DifyHttpClient()

    def close(self):
        """Close underlying HTTP client."""
        if self.http_client:
            self.http_client.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()

    def health_check(self) -> bool:
        """
        Check if the Dify service is reachable with the configured key.

        Returns:
            True if service is healthy
        """
        try:
            response = self.http_client.get("/datasets", params={"page": 1, "limit": 1})
            return response.is_success
        except DifyError as e:
            logger.error(f"Health check failed: {e}")
            return False


class ResourceService:
    """
    Shared plumbing for the per-resource services.

    Builds request models (mapping pydantic errors to DifyValidationError)
    and parses response bodies (mapping failures to DifySerializationError).
    """

    def __init__(self, http_client: DifyHttpClient):
        self.http_client = http_client

    @staticmethod
    def build_request(model_cls: type[M], **data) -> M:
        """
        Validate caller input into a request model before anything is sent.

        Raises:
            DifyValidationError: If a field is missing or invalid
        """
        try:
            return model_cls.model_validate(data)
        except ValidationError as e:
            errors = e.errors(include_url=False, include_context=False)
            fields = [".".join(str(p) for p in err["loc"]) for err in errors]
            field = fields[0] if len(fields) == 1 else None
            raise DifyValidationError(
                f"Invalid {model_cls.__name__}: {', '.join(f or '<root>' for f in fields)}",
                field=field,
                errors=errors,
            ) from e

    @staticmethod
    def to_payload(request: BaseModel) -> dict:
        """Serialize a request model, leaving out unset optional fields."""
        return request.model_dump(mode="json", exclude_none=True)

    @staticmethod
    def parse_json(response: httpx.Response, operation: str):
        """
        Decode a JSON response body.

        Raises:
            DifySerializationError: If the body is not JSON
        """
        try:
            return response.json()
        except ValueError as e:
            raise DifySerializationError(
                f"{operation}: response body is not valid JSON",
                operation=operation,
                body=getattr(response, "text", None),
            ) from e

    def parse(self, response: httpx.Response, model_cls: type[M], operation: str) -> M:
        """
        Decode and validate a response body into model_cls.

        Raises:
            DifySerializationError: If the body does not match the model
        """
        return self.validate(self.parse_json(response, operation), model_cls, operation)

    @staticmethod
    def validate(data, model_cls: type[M], operation: str) -> M:
        """Validate decoded JSON into model_cls."""
        try:
            return model_cls.model_validate(data)
        except ValidationError as e:
            raise DifySerializationError(
                f"{operation}: unexpected response schema for {model_cls.__name__}: "
                f"{e.error_count()} error(s)",
                operation=operation,
                body=data,
            ) from e
