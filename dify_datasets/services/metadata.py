import logging

from ..exceptions import DifyError
from ..models import (
    CreateMetadataRequest,
    MetadataDefinition,
    MetadataList,
    UpdateDocumentMetadataRequest,
    UpdateMetadataRequest,
)
from .base import ResourceService

logger = logging.getLogger(__name__)


class DifyMetadataService(ResourceService):
    """
    Service for dataset metadata fields and per-document metadata values.
    """

    def create_metadata(self, dataset_id: str, name: str, type: str) -> MetadataDefinition:
        """
        Define a metadata field on a dataset.

        Args:
            dataset_id: Dataset ID
            name: Field name
            type: "string", "number" or "time"
        """
        request = self.build_request(CreateMetadataRequest, name=name, type=type)

        try:
            logger.info(f"Creating metadata field '{name}' ({type}) in {dataset_id}")
            response = self.http_client.post(
                f"/datasets/{dataset_id}/metadata", json_data=self.to_payload(request)
            )
            return self.parse(response, MetadataDefinition, "create metadata")

        except DifyError as e:
            logger.error(f"Failed to create metadata field '{name}': {e}")
            raise

    def list_metadata(self, dataset_id: str) -> MetadataList:
        """List the metadata fields defined on a dataset."""
        try:
            response = self.http_client.get(f"/datasets/{dataset_id}/metadata")
            return self.parse(response, MetadataList, "list metadata")

        except DifyError as e:
            logger.error(f"Failed to list metadata of dataset {dataset_id}: {e}")
            raise

    def get_metadata(self, dataset_id: str, metadata_id: str) -> MetadataDefinition | None:
        """
        Get a metadata field.

        Returns:
            MetadataDefinition or None if the dataset has no such field
        """
        # No single-field endpoint; look it up in the list
        return self.list_metadata(dataset_id).get(metadata_id)

    def update_metadata(
        self, dataset_id: str, metadata_id: str, name: str
    ) -> MetadataDefinition:
        """Rename a metadata field."""
        request = self.build_request(UpdateMetadataRequest, name=name)

        try:
            logger.info(f"Renaming metadata field {metadata_id} to '{name}'")
            response = self.http_client.patch(
                f"/datasets/{dataset_id}/metadata/{metadata_id}",
                json_data=self.to_payload(request),
            )
            return self.parse(response, MetadataDefinition, "update metadata")

        except DifyError as e:
            logger.error(f"Failed to update metadata field {metadata_id}: {e}")
            raise

    def delete_metadata(self, dataset_id: str, metadata_id: str) -> None:
        """Delete a metadata field and its values on every document."""
        try:
            logger.info(f"Deleting metadata field {metadata_id}")
            self.http_client.delete(f"/datasets/{dataset_id}/metadata/{metadata_id}")

        except DifyError as e:
            logger.error(f"Failed to delete metadata field {metadata_id}: {e}")
            raise

    def toggle_built_in_metadata(self, dataset_id: str, enabled: bool) -> None:
        """Enable or disable the built-in metadata fields of a dataset."""
        action = "enable" if enabled else "disable"
        try:
            logger.info(f"Built-in metadata: {action} for dataset {dataset_id}")
            self.http_client.post(f"/datasets/{dataset_id}/metadata/built-in/{action}")

        except DifyError as e:
            logger.error(f"Failed to {action} built-in metadata: {e}")
            raise

    def update_document_metadata(self, dataset_id: str, operation_data: list) -> None:
        """
        Assign metadata values to documents in bulk.

        Args:
            dataset_id: Dataset ID
            operation_data: DocumentMetadataOperation objects or dicts of the form
                {"document_id": ..., "metadata_list": [{"id", "name", "value"}]}
        """
        request = self.build_request(
            UpdateDocumentMetadataRequest, operation_data=operation_data
        )

        try:
            logger.info(
                f"Updating metadata of {len(request.operation_data)} documents "
                f"in dataset {dataset_id}"
            )
            self.http_client.post(
                f"/datasets/{dataset_id}/documents/metadata",
                json_data=request.model_dump(mode="json"),
            )

        except DifyError as e:
            logger.error(f"Failed to update document metadata in {dataset_id}: {e}")
            raise
