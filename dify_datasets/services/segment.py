import logging

from ..exceptions import DifyError
from ..models import (
    CreateSegmentsRequest,
    Segment,
    SegmentPage,
    SegmentResponse,
    SegmentsCreateResponse,
    UpdateSegmentRequest,
)
from .base import ResourceService

logger = logging.getLogger(__name__)


class DifySegmentService(ResourceService):
    """
    Service for segments (chunks) of a document.
    """

    @staticmethod
    def _path(dataset_id: str, document_id: str, segment_id: str = None) -> str:
        path = f"/datasets/{dataset_id}/documents/{document_id}/segments"
        if segment_id:
            path = f"{path}/{segment_id}"
        return path

    def create_segments(
        self, dataset_id: str, document_id: str, segments: list
    ) -> SegmentsCreateResponse:
        """
        Add segments to a document.

        Args:
            dataset_id: Dataset ID
            document_id: Document ID
            segments: SegmentInput objects or dicts with content, answer, keywords

        Returns:
            SegmentsCreateResponse whose data[i] is the segment created from segments[i]

        Raises:
            DifyValidationError: If segments is empty or an entry has no content
        """
        request = self.build_request(CreateSegmentsRequest, segments=segments)

        try:
            logger.info(
                f"Creating {len(request.segments)} segments in document {document_id}"
            )
            response = self.http_client.post(
                self._path(dataset_id, document_id),
                json_data=self.to_payload(request),
            )
            result = self.parse(response, SegmentsCreateResponse, "create segments")

            if len(result.data) != len(request.segments):
                logger.warning(
                    f"Requested {len(request.segments)} segments, "
                    f"server returned {len(result.data)}"
                )
            logger.info(f"Created segments: {[s.id for s in result.data]}")
            return result

        except DifyError as e:
            logger.error(f"Failed to create segments in document {document_id}: {e}")
            raise

    def list_segments(
        self,
        dataset_id: str,
        document_id: str,
        keyword: str = None,
        status: str = None,
        page: int = 1,
        limit: int = 20,
    ) -> SegmentPage:
        """
        List segments of a document.

        Args:
            dataset_id: Dataset ID
            document_id: Document ID
            keyword: Filter by content
            status: Filter by indexing status (e.g. "completed")
            page: Page number (1-indexed)
            limit: Number of segments per page

        Returns:
            SegmentPage
        """
        try:
            logger.info(f"Listing segments for document {document_id}")
            response = self.http_client.get(
                self._path(dataset_id, document_id),
                params={
                    "keyword": keyword,
                    "status": status,
                    "page": page,
                    "limit": limit,
                },
            )
            result = self.parse(response, SegmentPage, "list segments")
            logger.info(f"Found {len(result.data)} segments (total: {result.total})")
            return result

        except DifyError as e:
            logger.error(f"Failed to list segments for document {document_id}: {e}")
            raise

    def get_segment(self, dataset_id: str, document_id: str, segment_id: str) -> Segment:
        """Get a single segment."""
        try:
            response = self.http_client.get(
                self._path(dataset_id, document_id, segment_id)
            )
            return self.parse(response, SegmentResponse, "get segment").data

        except DifyError as e:
            logger.error(f"Failed to get segment {segment_id}: {e}")
            raise

    def update_segment(
        self,
        dataset_id: str,
        document_id: str,
        segment_id: str,
        content: str,
        answer: str = None,
        keywords: list[str] = None,
        enabled: bool = None,
        regenerate_child_chunks: bool = None,
    ) -> Segment:
        """
        Update a segment.

        Args:
            dataset_id: Dataset ID
            document_id: Document ID
            segment_id: Segment ID
            content: New content
            answer: New answer (Q&A documents)
            keywords: New keywords
            enabled: Enable or disable the segment
            regenerate_child_chunks: Forwarded as-is; asks the server to rebuild
                the segment's child chunks

        Returns:
            Updated Segment
        """
        request = self.build_request(
            UpdateSegmentRequest,
            segment={
                "content": content,
                "answer": answer,
                "keywords": keywords,
                "enabled": enabled,
                "regenerate_child_chunks": regenerate_child_chunks,
            },
        )

        try:
            logger.info(f"Updating segment {segment_id}")
            response = self.http_client.post(
                self._path(dataset_id, document_id, segment_id),
                json_data=self.to_payload(request),
            )
            return self.parse(response, SegmentResponse, "update segment").data

        except DifyError as e:
            logger.error(f"Failed to update segment {segment_id}: {e}")
            raise

    def delete_segment(self, dataset_id: str, document_id: str, segment_id: str) -> None:
        """Delete a segment."""
        try:
            logger.info(f"Deleting segment {segment_id} from document {document_id}")
            self.http_client.delete(self._path(dataset_id, document_id, segment_id))

        except DifyError as e:
            logger.error(f"Failed to delete segment {segment_id}: {e}")
            raise
