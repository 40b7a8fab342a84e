import logging

from ..exceptions import DifyError
from ..models import RetrieveRequest, RetrieveResponse
from .base import ResourceService

logger = logging.getLogger(__name__)


class DifyRetrievalService(ResourceService):
    """
    Service for querying a dataset.
    """

    def retrieve(
        self, dataset_id: str, query: str, retrieval_model=None
    ) -> RetrieveResponse:
        """
        Retrieve the segments of a dataset that best match a query.

        Args:
            dataset_id: Dataset ID
            query: Query text
            retrieval_model: Optional RetrievalModel or dict overriding the
                dataset's defaults (search_method, reranking_enable, top_k,
                score_threshold_enabled, score_threshold, ...)

        Returns:
            RetrieveResponse with records ordered by rank

        Example:
            >>> result = client.retrieve(
            ...     "ds_123",
            ...     "What is a knowledge base?",
            ...     retrieval_model={"search_method": "hybrid_search", "top_k": 3},
            ... )
            >>> for record in result.records:
            ...     print(record.score, record.segment.document.name)
        """
        request = self.build_request(
            RetrieveRequest, query=query, retrieval_model=retrieval_model
        )

        try:
            logger.info(f"Retrieving from dataset {dataset_id}: '{query[:50]}'")
            response = self.http_client.post(
                f"/datasets/{dataset_id}/retrieve", json_data=self.to_payload(request)
            )
            result = self.parse(response, RetrieveResponse, "retrieve")
            logger.info(f"Retrieved {len(result.records)} records")
            return result

        except DifyError as e:
            logger.error(f"Retrieval from dataset {dataset_id} failed: {e}")
            raise
