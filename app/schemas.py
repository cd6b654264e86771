from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator


class LoginRequest(BaseModel):
    username: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = 'bearer'


class ApiResponse(BaseModel):
    ok: bool
    message: str
    data: Optional[Any] = None


class FileEntry(BaseModel):
    path: str = '/'
    name: str = ''
    is_directory: bool = False
    size: int = 0
    modified_at: int = 0


class ActionKind(str, Enum):
    COPY = 'copy'
    MOVE = 'move'
    DELETE = 'delete'
    RENAME = 'rename'
    CREATE_DIRECTORY = 'create_directory'


TARGETED_KINDS = frozenset({ActionKind.COPY, ActionKind.MOVE, ActionKind.RENAME})


class ActionRequest(BaseModel):
    kind: ActionKind
    source: FileEntry
    target: Optional[FileEntry] = None

    @model_validator(mode='after')
    def _target_matches_kind(self) -> 'ActionRequest':
        if self.kind in TARGETED_KINDS and self.target is None:
            raise ValueError(f'target is required for {self.kind.value}')
        return self


class DirectoryListing(BaseModel):
    entries: list[FileEntry] = Field(default_factory=list)
    total_space_bytes: int = Field(default=0, ge=0)
    free_space_bytes: int = Field(default=0, ge=0)


class ActionResult(BaseModel):
    message: str
    is_error: bool = False
    error_kind: Optional[str] = None
