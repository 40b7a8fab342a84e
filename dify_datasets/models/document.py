import os
from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    Field,
    NonNegativeInt,
    PositiveInt,
    field_validator,
    model_validator,
)

from .base import Page
from .dataset import IndexingTechnique
from .retrieval import RetrievalModel

DocForm = Literal["text_model", "hierarchical_model", "qa_model"]
DocumentStatusAction = Literal["enable", "disable", "archive", "un_archive"]

# Indexing states after which a document no longer changes on its own
TERMINAL_INDEXING_STATUSES = frozenset({"completed", "error", "paused"})


class Document(BaseModel):
    """Document entity."""

    id: str = Field(..., description="Document ID")
    position: int | None = Field(None, description="Position within the dataset")
    data_source_type: str | None = Field(
        None, description="upload_file, notion_import, ..."
    )
    data_source_info: dict[str, Any] | None = Field(
        None, description="Source details (e.g. upload_file_id)"
    )
    dataset_process_rule_id: str | None = Field(None, description="Process rule ID")
    name: str = Field(..., description="Document name")
    created_from: str | None = Field(None, description="api or web")
    created_by: str | None = Field(None, description="Creator account ID")
    created_at: int | None = Field(None, description="Creation timestamp (s)")
    tokens: int | None = Field(None, description="Token count")
    indexing_status: str | None = Field(
        None, description="waiting, parsing, ..., completed, error, paused"
    )
    error: str | None = Field(None, description="Indexing error")
    enabled: bool | None = Field(None, description="Whether the document is enabled")
    disabled_at: int | None = Field(None, description="Disable timestamp (s)")
    disabled_by: str | None = Field(None, description="Account that disabled it")
    archived: bool | None = Field(None, description="Whether the document is archived")
    display_status: str | None = Field(None, description="Status shown in the UI")
    word_count: int | None = Field(None, description="Word count")
    hit_count: int | None = Field(None, description="Retrieval hit count")
    doc_form: str | None = Field(None, description="Document form")
    doc_metadata: list[dict[str, Any]] | None = Field(
        None, description="Metadata values assigned to the document"
    )

    @property
    def is_indexed(self) -> bool:
        return self.indexing_status == "completed"


class DocumentPage(Page[Document]):
    """Page of documents in a dataset."""


class DocumentResponse(BaseModel):
    """Response of document create/update calls."""

    document: Document = Field(..., description="Created or updated document")
    batch: str | None = Field(None, description="Batch ID for indexing status")


class IndexingStatus(BaseModel):
    """Indexing progress of one document in a batch."""

    id: str = Field(..., description="Document ID")
    indexing_status: str = Field(..., description="Current indexing status")
    processing_started_at: float | None = None
    parsing_completed_at: float | None = None
    cleaning_completed_at: float | None = None
    splitting_completed_at: float | None = None
    completed_at: float | None = None
    paused_at: float | None = None
    error: str | None = None
    stopped_at: float | None = None
    completed_segments: int | None = None
    total_segments: int | None = None

    @property
    def is_finished(self) -> bool:
        return self.indexing_status in TERMINAL_INDEXING_STATUSES


class PreProcessingRule(BaseModel):
    id: Literal["remove_extra_spaces", "remove_urls_emails"]
    enabled: bool


class Segmentation(BaseModel):
    separator: str = Field("\n", description="Custom segment separator")
    max_tokens: PositiveInt = Field(..., description="Maximum tokens per segment")
    chunk_overlap: NonNegativeInt | None = Field(None, description="Token overlap")


class ProcessRules(BaseModel):
    pre_processing_rules: list[PreProcessingRule] = Field(default_factory=list)
    segmentation: Segmentation | None = None
    parent_mode: Literal["full-doc", "paragraph"] | None = None
    subchunk_segmentation: Segmentation | None = None


class ProcessRule(BaseModel):
    """
    How the server cleans and splits a document.

    ``automatic`` uses the server defaults; ``custom`` and ``hierarchical``
    must carry explicit rules.
    """

    mode: Literal["automatic", "custom", "hierarchical"] = "automatic"
    rules: ProcessRules | None = None

    @model_validator(mode="after")
    def rules_required_unless_automatic(self):
        if self.mode != "automatic" and self.rules is None:
            raise ValueError(f"rules are required for process_rule mode '{self.mode}'")
        return self


class DocumentSettings(BaseModel):
    """
    Indexing settings shared by every document creation call.

    process_rule, retrieval_model and doc_language are required: the
    server answers 400 without the latter two and 500 without a
    process rule.
    """

    model_config = {"extra": "forbid"}

    indexing_technique: IndexingTechnique | None = None
    doc_form: DocForm = "text_model"
    doc_language: str = Field(..., min_length=1, description="e.g. English, Chinese")
    process_rule: ProcessRule
    retrieval_model: RetrievalModel
    embedding_model: str | None = None
    embedding_model_provider: str | None = None
    original_document_id: str | None = None


class CreateDocumentByTextRequest(DocumentSettings):
    """Body of POST /datasets/{dataset_id}/document/create-by-text."""

    name: str = Field(..., min_length=1, description="Document name")
    text: str = Field(..., min_length=1, description="Document content")


class CreateDocumentByFileRequest(DocumentSettings):
    """JSON ``data`` part of POST /datasets/{dataset_id}/document/create-by-file."""


class UpdateDocumentByTextRequest(BaseModel):
    """Body of POST .../documents/{document_id}/update-by-text."""

    name: str | None = None
    text: str | None = None
    process_rule: ProcessRule | None = None

    @model_validator(mode="after")
    def something_to_update(self):
        if self.name is None and self.text is None and self.process_rule is None:
            raise ValueError("at least one of name, text or process_rule is required")
        if self.text is not None and not self.name:
            raise ValueError("name is required when text is updated")
        return self


class UpdateDocumentByFileRequest(BaseModel):
    """JSON ``data`` part of POST .../documents/{document_id}/update-by-file."""

    name: str | None = None
    process_rule: ProcessRule | None = None


class UpdateDocumentStatusRequest(BaseModel):
    """Body of PATCH .../documents/status/{action}."""

    document_ids: list[str] = Field(..., min_length=1)


class TextSource(BaseModel):
    """Inline text content for a new document."""

    kind: Literal["text"] = "text"
    name: str = Field(..., min_length=1, description="Document name")
    text: str = Field(..., min_length=1, description="Document content")


class FileSource(BaseModel):
    """
    Uploaded file content for a new document.

    ``file`` is a filesystem path, raw bytes, or an open binary handle.
    """

    kind: Literal["file"] = "file"
    file: Any = Field(..., description="Path, bytes or binary file object")
    filename: str | None = Field(None, description="Name sent with the upload")

    @field_validator("file")
    @classmethod
    def file_is_readable(cls, v):
        if isinstance(v, (str, os.PathLike)):
            if not os.path.isfile(v):
                raise ValueError(f"file not found: {v}")
        elif not isinstance(v, (bytes, bytearray)) and not hasattr(v, "read"):
            raise ValueError("file must be a path, bytes or a binary file object")
        return v

    @model_validator(mode="after")
    def filename_for_raw_content(self):
        if self.filename is None:
            if isinstance(self.file, (str, os.PathLike)):
                self.filename = os.path.basename(os.fspath(self.file))
            else:
                name = getattr(self.file, "name", None)
                if isinstance(name, str) and name:
                    self.filename = os.path.basename(name)
        if not self.filename:
            raise ValueError("filename is required when uploading raw content")
        return self


DocumentSource = Annotated[Union[TextSource, FileSource], Field(discriminator="kind")]
