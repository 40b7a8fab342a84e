from typing import Literal

from pydantic import BaseModel, Field

MetadataType = Literal["string", "number", "time"]


class MetadataDefinition(BaseModel):
    """Dataset-scoped metadata field."""

    id: str = Field(..., description="Metadata ID")
    name: str = Field(..., description="Field name")
    type: str = Field(..., description="string, number or time")
    use_count: int | None = Field(None, description="Documents using this field")


class MetadataList(BaseModel):
    """Response of GET /datasets/{dataset_id}/metadata."""

    doc_metadata: list[MetadataDefinition] = Field(default_factory=list)
    built_in_field_enabled: bool = Field(
        False, description="Whether built-in fields are enabled"
    )

    def get(self, metadata_id: str) -> MetadataDefinition | None:
        for definition in self.doc_metadata:
            if definition.id == metadata_id:
                return definition
        return None


class CreateMetadataRequest(BaseModel):
    name: str = Field(..., min_length=1)
    type: MetadataType


class UpdateMetadataRequest(BaseModel):
    name: str = Field(..., min_length=1)


class MetadataValue(BaseModel):
    """A value assigned to a metadata field on one document."""

    id: str = Field(..., description="Metadata ID")
    name: str = Field(..., description="Metadata name")
    value: str | int | float | None = Field(None, description="Assigned value")


class DocumentMetadataOperation(BaseModel):
    """Metadata assignments for one document."""

    document_id: str
    metadata_list: list[MetadataValue] = Field(default_factory=list)


class UpdateDocumentMetadataRequest(BaseModel):
    """Body of POST /datasets/{dataset_id}/documents/metadata."""

    operation_data: list[DocumentMetadataOperation] = Field(..., min_length=1)
