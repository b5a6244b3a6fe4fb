from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional


class TagsPage(BaseModel):
    """One page of a /v2/<name>/tags/list response"""
    name: Optional[str] = None
    tags: List[str] = Field(
        default_factory=list, validation_alias=AliasChoices("tags", "Tags")
    )

    @field_validator("tags", mode="before")
    @classmethod
    def null_tags_as_empty(cls, v):
        return [] if v is None else v


class ContinuationDescriptor(BaseModel):
    """Next-page target taken from a Link header, host and scheme dropped"""
    model_config = ConfigDict(frozen=True)

    path: str
    query: Optional[str] = None

    def target(self) -> str:
        if self.query:
            return f"{self.path}?{self.query}"
        return self.path


class ManifestDescriptor(BaseModel):
    """Content descriptor for a manifest config or layer"""
    mediaType: str
    digest: str
    size: int


class ManifestResponse(BaseModel):
    """Docker v2 schema 2 / OCI image manifest"""
    schemaVersion: int
    mediaType: str = Field(default="application/vnd.oci.image.manifest.v1+json")
    config: Optional[ManifestDescriptor] = None
    layers: List[ManifestDescriptor] = Field(default_factory=list)
