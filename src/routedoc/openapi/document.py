from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

OPENAPI_VERSION = "3.1.0"
FOLDER_EXTENSION = "x-apifox-folder"
NAME_EXTENSION = "x-apifox-name"

# methods a path-item may carry, in the order they are listed/searched
DOCUMENT_METHODS: tuple[str, ...] = ("get", "post", "put", "delete", "patch", "options", "head")


class Info(BaseModel):
    title: str
    version: str
    description: Optional[str] = None


class Server(BaseModel):
    url: str


class Tag(BaseModel):
    name: str


class Response(BaseModel):
    description: str


class Operation(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    summary: str
    description: str
    tags: Optional[list[str]] = None
    responses: dict[str, Response]
    operation_id: str = Field(alias="operationId")
    folder: Optional[str] = Field(default=None, alias=FOLDER_EXTENSION)


class ApiDocument(BaseModel):
    openapi: str = OPENAPI_VERSION
    info: Info
    servers: Optional[list[Server]] = None
    paths: dict[str, dict[str, Operation]] = Field(default_factory=dict)
    tags: list[Tag] = Field(default_factory=list)

    def operation_count(self) -> int:
        return sum(len(item) for item in self.paths.values())

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
