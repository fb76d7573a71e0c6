"""Models for template clustering and document-type suggestions."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class TemplateInfo(BaseModel):
    """Template metadata supplied by the template store."""

    model_config = ConfigDict(extra="forbid")

    id: str
    display_name: str = ""
    filename: str = ""
    document_type_id: str | None = None

    @property
    def name(self) -> str:
        return self.display_name or self.filename

    @property
    def is_assigned(self) -> bool:
        return bool(self.document_type_id)


class ExistingDocumentType(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    code: str
    name: str
    name_en: str = ""
    category: str = "other"
    color: str = ""
    is_active: bool = True


class SuggestedTemplate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    display_name: str = ""
    filename: str = ""
    suggested_variant: str = ""
    variant_order: int = 0


class SuggestedGroup(BaseModel):
    """Candidate document type for a cluster of templates."""

    model_config = ConfigDict(extra="forbid")

    suggested_name: str
    suggested_code: str
    suggested_category: str
    confidence: float = Field(ge=0.0, le=1.0)
    existing_type_id: str | None = None
    existing_type_name: str | None = None
    templates: list[SuggestedTemplate] = Field(default_factory=list)


class TemplateAssignment(BaseModel):
    model_config = ConfigDict(extra="forbid")

    template_id: str
    document_type_id: str
    variant_name: str
    variant_order: int


class AutoGroupResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    created_types: list[ExistingDocumentType] = Field(default_factory=list)
    assignments: list[TemplateAssignment] = Field(default_factory=list)
    skipped_codes: list[str] = Field(default_factory=list)
