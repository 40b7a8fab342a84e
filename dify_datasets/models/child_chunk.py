from pydantic import BaseModel, Field, field_validator

from .base import Page


class ChildChunk(BaseModel):
    """Child chunk: a finer-grained sub-unit of a segment."""

    id: str = Field(..., description="Child chunk ID")
    segment_id: str | None = Field(None, description="Parent segment ID")
    content: str = Field(..., description="Chunk content")
    position: int | None = Field(None, description="Position within the segment")
    word_count: int | None = Field(None, description="Word count")
    tokens: int | None = Field(None, description="Token count")
    index_node_id: str | None = Field(None, description="Index node ID")
    index_node_hash: str | None = Field(None, description="Index node hash")
    status: str | None = Field(None, description="Indexing status")
    type: str | None = Field(None, description="automatic or customized")
    score: float | None = Field(None, description="Relevance score (retrieval only)")
    created_by: str | None = Field(None, description="Creator account ID")
    created_at: int | None = Field(None, description="Creation timestamp (s)")
    updated_at: int | None = Field(None, description="Update timestamp (s)")
    indexing_at: int | None = Field(None, description="Indexing start timestamp")
    completed_at: int | None = Field(None, description="Completion timestamp")
    error: str | None = Field(None, description="Indexing error")
    stopped_at: int | None = Field(None, description="Stop timestamp")


class ChildChunkPage(Page[ChildChunk]):
    """Page of child chunks for one segment."""


class SaveChildChunkRequest(BaseModel):
    """Body of child chunk create and update calls."""

    content: str = Field(..., description="Chunk content")

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("content must not be blank")
        return v
