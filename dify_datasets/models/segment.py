from pydantic import BaseModel, Field, field_validator

from .base import Page
from .child_chunk import ChildChunk


class Segment(BaseModel):
    """Document segment: the unit of retrieval indexing."""

    id: str = Field(..., description="Segment ID")
    position: int | None = Field(None, description="Position within the document")
    document_id: str | None = Field(None, description="Parent document ID")
    content: str = Field(..., description="Segment content")
    answer: str | None = Field(None, description="Answer (Q&A documents only)")
    word_count: int | None = Field(None, description="Word count")
    tokens: int | None = Field(None, description="Token count")
    keywords: list[str] = Field(default_factory=list, description="Keywords, ordered")
    index_node_id: str | None = Field(None, description="Index node ID")
    index_node_hash: str | None = Field(None, description="Index node hash")
    hit_count: int = Field(0, description="Number of retrieval hits")
    enabled: bool = Field(True, description="Whether the segment is enabled")
    disabled_at: int | None = Field(None, description="Disable timestamp (s)")
    disabled_by: str | None = Field(None, description="Account that disabled it")
    status: str | None = Field(None, description="Indexing status")
    created_by: str | None = Field(None, description="Creator account ID")
    created_at: int | None = Field(None, description="Creation timestamp (s)")
    indexing_at: int | None = Field(None, description="Indexing start timestamp")
    completed_at: int | None = Field(None, description="Completion timestamp")
    error: str | None = Field(None, description="Indexing error")
    stopped_at: int | None = Field(None, description="Stop timestamp")
    child_chunks: list[ChildChunk] = Field(
        default_factory=list, description="Child chunks (parent-child mode)"
    )

    @field_validator("keywords", "child_chunks", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return [] if v is None else v


class SegmentsCreateResponse(BaseModel):
    """
    Response of POST .../segments.

    data is index-correspondent with the submitted segments.
    """

    data: list[Segment] = Field(default_factory=list, description="Created segments")
    doc_form: str | None = Field(None, description="Document form")


class SegmentPage(Page[Segment]):
    """Page of segments for one document."""

    doc_form: str | None = Field(None, description="Document form")


class SegmentResponse(BaseModel):
    """Response of single-segment get and update calls."""

    data: Segment = Field(..., description="Segment")
    doc_form: str | None = Field(None, description="Document form")


class SegmentInput(BaseModel):
    """One segment to create."""

    content: str = Field(..., description="Segment content")
    answer: str | None = Field(None, description="Answer (Q&A documents only)")
    keywords: list[str] | None = Field(None, description="Keywords")

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("content must not be blank")
        return v


class CreateSegmentsRequest(BaseModel):
    """Body of POST .../segments."""

    segments: list[SegmentInput] = Field(..., min_length=1)


class SegmentUpdate(BaseModel):
    """Fields of a segment update; unset fields are not sent."""

    content: str = Field(..., description="New content")
    answer: str | None = Field(None, description="New answer")
    keywords: list[str] | None = Field(None, description="New keywords")
    enabled: bool | None = Field(None, description="Enable or disable")
    regenerate_child_chunks: bool | None = Field(
        None, description="Ask the server to rebuild child chunks"
    )


class UpdateSegmentRequest(BaseModel):
    """Body of POST .../segments/{segment_id}."""

    segment: SegmentUpdate
