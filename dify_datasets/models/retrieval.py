from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, PositiveInt, field_validator

from .child_chunk import ChildChunk
from .segment import Segment


class SearchMethod(str, Enum):
    """Search methods supported by dataset retrieval."""

    KEYWORD = "keyword_search"
    SEMANTIC = "semantic_search"
    FULL_TEXT = "full_text_search"
    HYBRID = "hybrid_search"


class RerankingModel(BaseModel):
    """Rerank model selection."""

    reranking_provider_name: str = Field(..., description="Rerank model provider")
    reranking_model_name: str = Field(..., description="Rerank model name")


class RetrievalModel(BaseModel):
    """
    Retrieval configuration.

    Used both as a dataset/document default and per query. The server only
    applies score_threshold when score_threshold_enabled is true; the client
    forwards both values as given.
    """

    search_method: SearchMethod | None = Field(None, description="Search method")
    reranking_enable: bool | None = Field(None, description="Enable reranking")
    reranking_mode: str | None = Field(
        None, description="reranking_model or weighted_score"
    )
    reranking_model: RerankingModel | None = Field(None, description="Rerank model")
    weights: dict[str, Any] | None = Field(
        None, description="Weights for weighted_score hybrid search"
    )
    top_k: PositiveInt | None = Field(None, description="Number of results")
    score_threshold_enabled: bool | None = Field(
        None, description="Whether score_threshold applies"
    )
    score_threshold: float | None = Field(
        None, ge=0.0, le=1.0, description="Minimum relevance score"
    )
    metadata_filtering_conditions: dict[str, Any] | None = Field(
        None, description="Metadata filter conditions"
    )

    model_config = {"use_enum_values": True}


class RetrieveRequest(BaseModel):
    """Body of POST /datasets/{dataset_id}/retrieve."""

    query: str = Field(..., description="Query text")
    retrieval_model: RetrievalModel | None = Field(None, description="Overrides")

    @field_validator("query")
    @classmethod
    def query_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("query must not be blank")
        return v


class RetrievedDocument(BaseModel):
    """Document summary nested in a retrieved segment."""

    id: str = Field(..., description="Document ID")
    data_source_type: str | None = Field(None, description="Data source type")
    name: str | None = Field(None, description="Document name")


class RetrievedSegment(Segment):
    """Segment as returned by retrieval, with its parent document."""

    document: RetrievedDocument | None = Field(None, description="Parent document")


class RetrieveRecord(BaseModel):
    """A single ranked retrieval hit."""

    segment: RetrievedSegment = Field(..., description="Matched segment")
    score: float | None = Field(None, description="Relevance score")
    tsne_position: Any = Field(None, description="t-SNE position, if computed")
    child_chunks: list[ChildChunk] | None = Field(
        None, description="Matched child chunks (parent-child indexing)"
    )


class RetrieveQuery(BaseModel):
    content: str = Field(..., description="Query text echoed back")


class RetrieveResponse(BaseModel):
    """Response of dataset retrieval; records are ordered by rank."""

    query: RetrieveQuery = Field(..., description="Echoed query")
    records: list[RetrieveRecord] = Field(
        default_factory=list, description="Ranked records"
    )
