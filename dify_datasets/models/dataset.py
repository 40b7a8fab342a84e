from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from .base import Page
from .retrieval import RetrievalModel

IndexingTechnique = Literal["high_quality", "economy"]
Permission = Literal["only_me", "all_team_members", "partial_members"]
Provider = Literal["vendor", "external"]


class Dataset(BaseModel):
    """Dataset (knowledge base) entity."""

    id: str = Field(..., description="Dataset ID")
    name: str = Field(..., description="Dataset name")
    description: str | None = Field(None, description="Dataset description")
    provider: str | None = Field(None, description="vendor or external")
    permission: str | None = Field(None, description="Visibility of the dataset")
    data_source_type: str | None = Field(None, description="Data source type")
    indexing_technique: str | None = Field(
        None, description="high_quality or economy"
    )
    app_count: int = Field(0, description="Number of apps using this dataset")
    document_count: int = Field(0, description="Number of documents")
    word_count: int = Field(0, description="Total word count")
    created_by: str | None = Field(None, description="Creator account ID")
    created_at: int | None = Field(None, description="Creation timestamp (s)")
    updated_by: str | None = Field(None, description="Last editor account ID")
    updated_at: int | None = Field(None, description="Update timestamp (s)")
    embedding_model: str | None = Field(None, description="Embedding model name")
    embedding_model_provider: str | None = Field(
        None, description="Embedding model provider"
    )
    embedding_available: bool | None = Field(
        None, description="Whether the embedding model is usable"
    )
    retrieval_model_dict: dict[str, Any] | None = Field(
        None, description="Default retrieval settings"
    )
    tags: list[dict[str, Any]] = Field(default_factory=list, description="Tags")
    doc_form: str | None = Field(None, description="Document form of the dataset")


class DatasetPage(Page[Dataset]):
    """Page of datasets returned by GET /datasets."""


class CreateDatasetRequest(BaseModel):
    """Body of POST /datasets."""

    model_config = {"extra": "forbid"}

    name: str = Field(..., min_length=1, max_length=40, description="Dataset name")
    description: str | None = Field(None, max_length=400)
    indexing_technique: IndexingTechnique | None = None
    permission: Permission | None = None
    provider: Provider | None = None
    external_knowledge_api_id: str | None = None
    external_knowledge_id: str | None = None
    embedding_model: str | None = None
    embedding_model_provider: str | None = None
    retrieval_model: RetrievalModel | None = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name must not be blank")
        return v


class UpdateDatasetRequest(BaseModel):
    """Body of PATCH /datasets/{dataset_id}. Only provided fields are sent."""

    model_config = {"extra": "forbid"}

    name: str | None = Field(None, min_length=1, max_length=40)
    description: str | None = Field(None, max_length=400)
    indexing_technique: IndexingTechnique | None = None
    permission: Permission | None = None
    embedding_model: str | None = None
    embedding_model_provider: str | None = None
    retrieval_model: RetrievalModel | None = None
    partial_member_list: list[dict[str, Any]] | None = None
