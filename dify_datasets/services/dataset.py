import logging

from ..exceptions import DifyError
from ..models import (
    CreateDatasetRequest,
    Dataset,
    DatasetPage,
    UpdateDatasetRequest,
)
from .base import ResourceService

logger = logging.getLogger(__name__)


class DifyDatasetService(ResourceService):
    """
    Service for Dify dataset management.
    """

    def create_dataset(
        self,
        name: str,
        description: str = None,
        indexing_technique: str = None,
        permission: str = None,
        provider: str = None,
        **kwargs,
    ) -> Dataset:
        """
        Create a new, empty dataset.

        Args:
            name: Dataset name (required, 1-40 chars)
            description: Dataset description
            indexing_technique: "high_quality" or "economy"
            permission: "only_me", "all_team_members" or "partial_members"
            provider: "vendor" (default) or "external"
            **kwargs: Additional fields accepted by the API:
                - external_knowledge_api_id / external_knowledge_id
                - embedding_model / embedding_model_provider
                - retrieval_model (RetrievalModel or dict)

        Returns:
            Dataset object with its server-assigned ID

        Raises:
            DifyValidationError: If name is empty or a field is invalid
            DifyAPIError: If the server rejects the request
        """
        request = self.build_request(
            CreateDatasetRequest,
            name=name,
            description=description,
            indexing_technique=indexing_technique,
            permission=permission,
            provider=provider,
            **kwargs,
        )

        try:
            logger.info(f"Creating dataset: {name}")
            response = self.http_client.post(
                "/datasets", json_data=self.to_payload(request)
            )
            dataset = self.parse(response, Dataset, "create dataset")
            logger.info(f"Dataset created successfully: {dataset.id}")
            return dataset

        except DifyError as e:
            logger.error(f"Failed to create dataset '{name}': {e}")
            raise

    def list_datasets(
        self,
        page: int = 1,
        limit: int = 20,
        keyword: str = None,
        tag_ids: list[str] = None,
        include_all: bool = None,
    ) -> DatasetPage:
        """
        List datasets.

        page and limit are passed through unchanged; the server clamps or
        rejects out-of-range values.

        Args:
            page: Page number (1-indexed)
            limit: Number of datasets per page
            keyword: Filter by name
            tag_ids: Filter by tag IDs
            include_all: Include datasets of all workspace members (owner keys only)

        Returns:
            DatasetPage
        """
        try:
            logger.info(f"Listing datasets (page={page}, limit={limit})")

            params = {"page": page, "limit": limit, "keyword": keyword}
            if tag_ids:
                params["tag_ids"] = tag_ids
            if include_all is not None:
                params["include_all"] = str(include_all).lower()

            response = self.http_client.get("/datasets", params=params)
            result = self.parse(response, DatasetPage, "list datasets")

            logger.info(f"Retrieved {len(result.data)} datasets (total: {result.total})")
            return result

        except DifyError as e:
            logger.error(f"Failed to list datasets: {e}")
            raise

    def get_dataset(self, dataset_id: str) -> Dataset:
        """
        Get dataset information.

        Args:
            dataset_id: Dataset ID

        Returns:
            Dataset object

        Raises:
            DifyAPIError: 404 if the dataset does not exist
        """
        try:
            logger.info(f"Getting dataset: {dataset_id}")
            response = self.http_client.get(f"/datasets/{dataset_id}")
            return self.parse(response, Dataset, "get dataset")

        except DifyError as e:
            logger.error(f"Failed to get dataset '{dataset_id}': {e}")
            raise

    def update_dataset(self, dataset_id: str, **fields) -> Dataset:
        """
        Update dataset configuration.

        Args:
            dataset_id: Dataset ID
            **fields: Any of name, description, indexing_technique, permission,
                embedding_model, embedding_model_provider, retrieval_model,
                partial_member_list

        Returns:
            Updated Dataset object
        """
        request = self.build_request(UpdateDatasetRequest, **fields)
        payload = self.to_payload(request)

        if not payload:
            logger.warning("No update fields provided, fetching dataset unchanged")
            return self.get_dataset(dataset_id)

        try:
            logger.info(f"Updating dataset: {dataset_id}")
            response = self.http_client.patch(
                f"/datasets/{dataset_id}", json_data=payload
            )
            dataset = self.parse(response, Dataset, "update dataset")
            logger.info(f"Dataset updated successfully: {dataset_id}")
            return dataset

        except DifyError as e:
            logger.error(f"Failed to update dataset '{dataset_id}': {e}")
            raise

    def delete_dataset(self, dataset_id: str) -> None:
        """
        Delete a dataset.

        Args:
            dataset_id: Dataset ID to delete
        """
        try:
            logger.info(f"Deleting dataset: {dataset_id}")
            self.http_client.delete(f"/datasets/{dataset_id}")
            logger.info(f"Dataset deleted successfully: {dataset_id}")

        except DifyError as e:
            logger.error(f"Failed to delete dataset '{dataset_id}': {e}")
            raise
