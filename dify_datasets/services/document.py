import json
import logging
import os
import time
from contextlib import ExitStack

from ..exceptions import DifyError, DifyIndexingTimeoutError, DifyValidationError
from ..models import (
    CreateDocumentByFileRequest,
    CreateDocumentByTextRequest,
    Document,
    DocumentPage,
    DocumentResponse,
    FileSource,
    IndexingStatus,
    TextSource,
    UpdateDocumentByFileRequest,
    UpdateDocumentByTextRequest,
    UpdateDocumentStatusRequest,
)
from .base import ResourceService

logger = logging.getLogger(__name__)

DOCUMENT_STATUS_ACTIONS = ("enable", "disable", "archive", "un_archive")


class DifyDocumentService(ResourceService):
    """
    Service for Dify document management.
    """

    DEFAULT_POLL_INTERVAL = 2.0
    DEFAULT_INDEXING_TIMEOUT = 300.0

    def create_document_by_text(
        self,
        dataset_id: str,
        name: str,
        text: str,
        doc_language: str = None,
        process_rule=None,
        retrieval_model=None,
        indexing_technique: str = None,
        doc_form: str = "text_model",
        **kwargs,
    ) -> DocumentResponse:
        """
        Create a document from inline text.

        Args:
            dataset_id: Target dataset ID
            name: Document name
            text: Document content
            doc_language: Document language (required, e.g. "English")
            process_rule: ProcessRule or dict (required, e.g. {"mode": "automatic"})
            retrieval_model: RetrievalModel or dict (required)
            indexing_technique: "high_quality" or "economy"
            doc_form: "text_model", "hierarchical_model" or "qa_model"
            **kwargs: embedding_model, embedding_model_provider, original_document_id

        Returns:
            DocumentResponse with the new document and its indexing batch ID

        Raises:
            DifyValidationError: If a required field is missing; nothing is sent
            DifyAPIError: If the server rejects the request
        """
        request = self.build_request(
            CreateDocumentByTextRequest,
            name=name,
            text=text,
            doc_language=doc_language,
            process_rule=process_rule,
            retrieval_model=retrieval_model,
            indexing_technique=indexing_technique,
            doc_form=doc_form,
            **kwargs,
        )

        try:
            logger.info(f"Creating text document '{name}' in dataset {dataset_id}")
            response = self.http_client.post(
                f"/datasets/{dataset_id}/document/create-by-text",
                json_data=self.to_payload(request),
            )
            result = self.parse(response, DocumentResponse, "create document by text")
            logger.info(
                f"Document created: {result.document.id} (batch: {result.batch})"
            )
            return result

        except DifyError as e:
            logger.error(f"Failed to create text document '{name}': {e}")
            raise

    def create_document_by_file(
        self,
        dataset_id: str,
        file,
        filename: str = None,
        doc_language: str = None,
        process_rule=None,
        retrieval_model=None,
        indexing_technique: str = None,
        doc_form: str = "text_model",
        **kwargs,
    ) -> DocumentResponse:
        """
        Create a document by uploading a file.

        The settings travel as a JSON ``data`` form field next to the binary
        ``file`` part.

        Args:
            dataset_id: Target dataset ID
            file: Path to the file, raw bytes, or an open binary file object
            filename: Name sent with the upload (defaults to the file's basename)
            doc_language, process_rule, retrieval_model, indexing_technique,
            doc_form, **kwargs: As for create_document_by_text

        Returns:
            DocumentResponse with the new document and its indexing batch ID
        """
        source = self.build_request(FileSource, file=file, filename=filename)
        request = self.build_request(
            CreateDocumentByFileRequest,
            doc_language=doc_language,
            process_rule=process_rule,
            retrieval_model=retrieval_model,
            indexing_technique=indexing_technique,
            doc_form=doc_form,
            **kwargs,
        )

        try:
            logger.info(
                f"Uploading file '{source.filename}' to dataset {dataset_id}"
            )
            response = self._upload(
                f"/datasets/{dataset_id}/document/create-by-file", source, request
            )
            result = self.parse(response, DocumentResponse, "create document by file")
            logger.info(
                f"Document created: {result.document.id} (batch: {result.batch})"
            )
            return result

        except DifyError as e:
            logger.error(f"Failed to upload file '{source.filename}': {e}")
            raise

    def create_document(
        self, dataset_id: str, source: TextSource | FileSource, **settings
    ) -> DocumentResponse:
        """
        Create a document from exactly one content source.

        Args:
            dataset_id: Target dataset ID
            source: TextSource or FileSource
            **settings: Indexing settings, as for create_document_by_text

        Returns:
            DocumentResponse
        """
        if isinstance(source, TextSource):
            return self.create_document_by_text(
                dataset_id, name=source.name, text=source.text, **settings
            )
        if isinstance(source, FileSource):
            return self.create_document_by_file(
                dataset_id, file=source.file, filename=source.filename, **settings
            )
        raise DifyValidationError(
            "source must be a TextSource or a FileSource", field="source"
        )

    def update_document_by_text(
        self,
        dataset_id: str,
        document_id: str,
        name: str = None,
        text: str = None,
        process_rule=None,
    ) -> DocumentResponse:
        """
        Update a document's name, text and/or process rule.

        Returns:
            DocumentResponse; a new batch ID is issued when re-indexing starts
        """
        request = self.build_request(
            UpdateDocumentByTextRequest,
            name=name,
            text=text,
            process_rule=process_rule,
        )

        try:
            logger.info(f"Updating document {document_id} in dataset {dataset_id}")
            response = self.http_client.post(
                f"/datasets/{dataset_id}/documents/{document_id}/update-by-text",
                json_data=self.to_payload(request),
            )
            return self.parse(response, DocumentResponse, "update document by text")

        except DifyError as e:
            logger.error(f"Failed to update document {document_id}: {e}")
            raise

    def update_document_by_file(
        self,
        dataset_id: str,
        document_id: str,
        file,
        filename: str = None,
        name: str = None,
        process_rule=None,
    ) -> DocumentResponse:
        """
        Replace a document's content with an uploaded file.

        Returns:
            DocumentResponse
        """
        source = self.build_request(FileSource, file=file, filename=filename)
        request = self.build_request(
            UpdateDocumentByFileRequest, name=name, process_rule=process_rule
        )

        try:
            logger.info(
                f"Uploading file '{source.filename}' over document {document_id}"
            )
            response = self._upload(
                f"/datasets/{dataset_id}/documents/{document_id}/update-by-file",
                source,
                request,
            )
            return self.parse(response, DocumentResponse, "update document by file")

        except DifyError as e:
            logger.error(f"Failed to update document {document_id} from file: {e}")
            raise

    def get_document(
        self, dataset_id: str, document_id: str, metadata: str = "all"
    ) -> Document:
        """
        Get a document's details.

        Args:
            dataset_id: Dataset ID
            document_id: Document ID
            metadata: "all", "only" or "without"
        """
        try:
            logger.info(f"Getting document {document_id}")
            response = self.http_client.get(
                f"/datasets/{dataset_id}/documents/{document_id}",
                params={"metadata": metadata},
            )
            return self.parse(response, Document, "get document")

        except DifyError as e:
            logger.error(f"Failed to get document {document_id}: {e}")
            raise

    def list_documents(
        self,
        dataset_id: str,
        keyword: str = None,
        page: int = 1,
        limit: int = 20,
    ) -> DocumentPage:
        """
        List documents in a dataset.

        Args:
            dataset_id: Dataset ID
            keyword: Filter by document name
            page: Page number (1-indexed)
            limit: Number of documents per page

        Returns:
            DocumentPage
        """
        try:
            logger.info(f"Listing documents in dataset {dataset_id}")
            response = self.http_client.get(
                f"/datasets/{dataset_id}/documents",
                params={"keyword": keyword, "page": page, "limit": limit},
            )
            result = self.parse(response, DocumentPage, "list documents")
            logger.info(
                f"Retrieved {len(result.data)} documents (total: {result.total})"
            )
            return result

        except DifyError as e:
            logger.error(f"Failed to list documents in dataset {dataset_id}: {e}")
            raise

    def delete_document(self, dataset_id: str, document_id: str) -> None:
        """
        Delete a document.

        Deleting an already deleted document surfaces the server's 404 as a
        DifyAPIError; callers may treat that as success.
        """
        try:
            logger.info(f"Deleting document {document_id} from dataset {dataset_id}")
            self.http_client.delete(f"/datasets/{dataset_id}/documents/{document_id}")
            logger.info(f"Document {document_id} deleted successfully")

        except DifyError as e:
            logger.error(f"Failed to delete document {document_id}: {e}")
            raise

    def update_document_status(
        self, dataset_id: str, action: str, document_ids: list[str]
    ) -> None:
        """
        Enable, disable, archive or un-archive documents in bulk.

        Args:
            dataset_id: Dataset ID
            action: One of "enable", "disable", "archive", "un_archive"
            document_ids: Documents to change
        """
        if action not in DOCUMENT_STATUS_ACTIONS:
            raise DifyValidationError(
                f"action must be one of {', '.join(DOCUMENT_STATUS_ACTIONS)}",
                field="action",
            )
        request = self.build_request(
            UpdateDocumentStatusRequest, document_ids=document_ids
        )

        try:
            logger.info(
                f"Applying '{action}' to {len(document_ids)} documents in {dataset_id}"
            )
            self.http_client.patch(
                f"/datasets/{dataset_id}/documents/status/{action}",
                json_data=self.to_payload(request),
            )

        except DifyError as e:
            logger.error(f"Failed to {action} documents in dataset {dataset_id}: {e}")
            raise

    def get_indexing_status(self, dataset_id: str, batch: str) -> list[IndexingStatus]:
        """
        Get the indexing progress of the documents created in a batch.

        Args:
            dataset_id: Dataset ID
            batch: Batch ID from DocumentResponse.batch

        Returns:
            One IndexingStatus per document in the batch
        """
        try:
            response = self.http_client.get(
                f"/datasets/{dataset_id}/documents/{batch}/indexing-status"
            )
            data = self.parse_json(response, "get indexing status")
            items = data.get("data", []) if isinstance(data, dict) else data
            statuses = [
                self.validate(item, IndexingStatus, "get indexing status")
                for item in items or []
            ]
            logger.info(
                f"Batch {batch}: "
                + ", ".join(f"{s.id}={s.indexing_status}" for s in statuses)
            )
            return statuses

        except DifyError as e:
            logger.error(f"Failed to get indexing status for batch {batch}: {e}")
            raise

    def wait_for_indexing(
        self,
        dataset_id: str,
        batch: str,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        timeout: float = DEFAULT_INDEXING_TIMEOUT,
    ) -> list[IndexingStatus]:
        """
        Poll indexing status until every document in the batch is finished.

        Finished means completed, error or paused; callers inspect the
        returned statuses to tell them apart.

        Args:
            dataset_id: Dataset ID
            batch: Batch ID from DocumentResponse.batch
            poll_interval: Seconds between polls
            timeout: Seconds to wait before giving up

        Returns:
            Final IndexingStatus list

        Raises:
            DifyIndexingTimeoutError: If the batch is still running after
                timeout seconds
        """
        if poll_interval <= 0 or timeout <= 0:
            raise DifyValidationError("poll_interval and timeout must be positive")

        deadline = time.monotonic() + timeout
        while True:
            statuses = self.get_indexing_status(dataset_id, batch)
            if statuses and all(s.is_finished for s in statuses):
                return statuses

            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise DifyIndexingTimeoutError(
                    f"Indexing of batch {batch} not finished after {timeout}s",
                    timeout=timeout,
                    batch=batch,
                    statuses=statuses,
                )
            time.sleep(min(poll_interval, remaining))

    def _upload(self, path: str, source: FileSource, request):
        with ExitStack() as stack:
            content = source.file
            if isinstance(content, (str, os.PathLike)):
                content = stack.enter_context(open(content, "rb"))
            files = {"file": (source.filename, content)}
            data = {"data": json.dumps(self.to_payload(request))}
            return self.http_client.upload(path, files=files, data=data)
