"""Spike data models.

A spike is a named, parameterized scaffold: a set of file templates (and
optionally unified-diff patches) for one technology combination. SpikeSpec is
the full definition; SpikeMetadata is the lightweight projection used for
ranking without carrying file bodies.
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field, model_validator


class SpikeParam(BaseModel):
    """A named parameter substituted into file templates."""

    name: str = Field(description="Token name, e.g. 'app_name'")
    required: bool = Field(default=False, description="Whether a value must be supplied")
    description: str | None = Field(default=None, description="Human-readable hint")
    default: str | None = Field(default=None, description="Value used when none is supplied")


class SpikeFile(BaseModel):
    """A file template. ``template`` holds ``{{token}}`` placeholders."""

    path: str = Field(description="Relative file path (may contain tokens)")
    template: str | None = Field(default=None, description="Raw template text")
    content: str | None = Field(default=None, description="Already-rendered content")

    @property
    def body(self) -> str:
        """Template text to render, preferring rendered content when present."""
        if self.content:
            return self.content
        return self.template or ""


class SpikePatch(BaseModel):
    """A unified diff to apply to an existing file."""

    path: str
    diff: str


class SpikeMetadata(BaseModel):
    """Lightweight projection of a spike used for ranking."""

    id: str
    name: str
    description: str | None = None
    stack: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    version: str | None = None
    file_count: int = 0
    patch_count: int = 0


class SpikeSpec(BaseModel):
    """Complete spike definition, loaded or synthesized on demand."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    name: str = ""
    version: str | None = None
    stack: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    description: str | None = None
    params: List[SpikeParam] = Field(default_factory=list)
    files: List[SpikeFile] = Field(default_factory=list)
    patches: List[SpikePatch] = Field(default_factory=list)

    @model_validator(mode="after")
    def _default_name(self) -> "SpikeSpec":
        if not self.name:
            self.name = self.id
        return self

    def to_metadata(self) -> SpikeMetadata:
        """Extract the ranking projection of this spec."""
        return SpikeMetadata(
            id=self.id,
            name=self.name or self.id,
            description=self.description,
            stack=list(self.stack),
            tags=list(self.tags),
            version=self.version,
            file_count=len(self.files),
            patch_count=len(self.patches),
        )

    def param_defaults(self) -> dict[str, str]:
        """Map of param name to default value, for params that declare one."""
        return {p.name: p.default for p in self.params if p.default is not None}


class RenderedFile(BaseModel):
    """A concrete file produced by rendering a SpikeFile."""

    path: str
    content: str

    @property
    def body(self) -> str:
        return self.content


class MatchCandidate(BaseModel):
    """Transient ranking entry."""

    id: str
    score: float
    alias: bool = False
