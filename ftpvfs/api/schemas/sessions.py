from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class PathRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    path: str = Field(default="", max_length=4096)


class MkdirRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    path: str = Field(min_length=1, max_length=4096)
    mode: int | None = Field(default=None, ge=0, le=0o7777)


class RenameRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    from_path: str = Field(min_length=1, max_length=4096)
    to_path: str = Field(min_length=1, max_length=4096)


class SessionResponse(BaseModel):
    session_id: str
    cwd: str


class CwdResponse(BaseModel):
    cwd: str


class ResolvedPathResponse(BaseModel):
    path: str


class StatResponse(BaseModel):
    path: str
    mode: int
    size: int
    mtime: float
    is_dir: bool
    is_file: bool
