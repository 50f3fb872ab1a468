from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

EntryKind = Literal["file", "directory"]


class Entry(BaseModel):
    """A file or directory node handed out by a ``FileSystem`` adapter."""

    model_config = ConfigDict(frozen=True)

    name: str
    kind: EntryKind
    path: str


class CodeLocation(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    text: str


class Animation(BaseModel):
    name: str | None = None
    layers: list[str] = Field(default_factory=list)


class Layer(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="$id")
    keyframes: list[str] = Field(default_factory=list)


class Keyframe(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="$id")
    code: str | None = None


class EntityDocument(BaseModel):
    animations: list[Animation] = Field(default_factory=list)
    layers: list[Layer] = Field(default_factory=list)
    keyframes: list[Keyframe] = Field(default_factory=list)


class UnresolvedMatch(BaseModel):
    model_config = ConfigDict(frozen=True)

    location: str
    line: str


class FileError(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str
    message: str


class MatchReport(BaseModel):
    path: str
    unresolved: list[UnresolvedMatch] = Field(default_factory=list)
    fixed: int = 0
    dropped_resource_ids: list[str] = Field(default_factory=list)


class AggregateReport(BaseModel):
    unresolved: list[UnresolvedMatch] = Field(default_factory=list)
    fixed: int = 0
    files: int = 0
    errors: list[FileError] = Field(default_factory=list)
    dropped_resource_ids: list[str] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.fixed == 0 and not self.unresolved


class FixRun(BaseModel):
    content: AggregateReport
    audio: AggregateReport
