import logging

from ..exceptions import DifyError
from ..models import ChildChunk, ChildChunkPage, SaveChildChunkRequest
from .base import ResourceService

logger = logging.getLogger(__name__)


class DifyChildChunkService(ResourceService):
    """
    Service for child chunks of a segment.
    """

    @staticmethod
    def _path(
        dataset_id: str, document_id: str, segment_id: str, child_chunk_id: str = None
    ) -> str:
        path = (
            f"/datasets/{dataset_id}/documents/{document_id}"
            f"/segments/{segment_id}/child_chunks"
        )
        if child_chunk_id:
            path = f"{path}/{child_chunk_id}"
        return path

    def _unwrap(self, response, operation: str) -> ChildChunk:
        data = self.parse_json(response, operation)
        if isinstance(data, dict) and "data" in data:
            data = data["data"]
        return self.validate(data, ChildChunk, operation)

    def create_child_chunk(
        self, dataset_id: str, document_id: str, segment_id: str, content: str
    ) -> ChildChunk:
        """
        Create a child chunk under a segment.

        Returns:
            The created ChildChunk
        """
        request = self.build_request(SaveChildChunkRequest, content=content)

        try:
            logger.info(f"Creating child chunk in segment {segment_id}")
            response = self.http_client.post(
                self._path(dataset_id, document_id, segment_id),
                json_data=self.to_payload(request),
            )
            chunk = self._unwrap(response, "create child chunk")
            logger.info(f"Child chunk created: {chunk.id}")
            return chunk

        except DifyError as e:
            logger.error(f"Failed to create child chunk in segment {segment_id}: {e}")
            raise

    def list_child_chunks(
        self,
        dataset_id: str,
        document_id: str,
        segment_id: str,
        keyword: str = None,
        page: int = 1,
        limit: int = 20,
    ) -> ChildChunkPage:
        """List child chunks of a segment."""
        try:
            response = self.http_client.get(
                self._path(dataset_id, document_id, segment_id),
                params={"keyword": keyword, "page": page, "limit": limit},
            )
            result = self.parse(response, ChildChunkPage, "list child chunks")
            logger.info(
                f"Found {len(result.data)} child chunks in segment {segment_id}"
            )
            return result

        except DifyError as e:
            logger.error(f"Failed to list child chunks of segment {segment_id}: {e}")
            raise

    def update_child_chunk(
        self,
        dataset_id: str,
        document_id: str,
        segment_id: str,
        child_chunk_id: str,
        content: str,
    ) -> ChildChunk:
        """Replace a child chunk's content."""
        request = self.build_request(SaveChildChunkRequest, content=content)

        try:
            logger.info(f"Updating child chunk {child_chunk_id}")
            response = self.http_client.patch(
                self._path(dataset_id, document_id, segment_id, child_chunk_id),
                json_data=self.to_payload(request),
            )
            return self._unwrap(response, "update child chunk")

        except DifyError as e:
            logger.error(f"Failed to update child chunk {child_chunk_id}: {e}")
            raise

    def delete_child_chunk(
        self,
        dataset_id: str,
        document_id: str,
        segment_id: str,
        child_chunk_id: str,
    ) -> None:
        """Delete a child chunk."""
        try:
            logger.info(f"Deleting child chunk {child_chunk_id}")
            self.http_client.delete(
                self._path(dataset_id, document_id, segment_id, child_chunk_id)
            )

        except DifyError as e:
            logger.error(f"Failed to delete child chunk {child_chunk_id}: {e}")
            raise
