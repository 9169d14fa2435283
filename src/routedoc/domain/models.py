from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

HttpMethod = Literal["get", "post", "put", "delete", "patch", "options", "head", "all"]
RouteOrigin = Literal["annotation", "call-chain"]

HTTP_METHODS: tuple[str, ...] = ("get", "post", "put", "delete", "patch", "options", "head", "all")

DEFAULT_PATTERNS: tuple[str, ...] = (
    "src/**/*controller.{ts,tsx,js,jsx}",
    "src/**/*Controller.{ts,tsx,js,jsx}",
    "src/**/*router.{ts,tsx,js,jsx}",
    "src/**/*Router.{ts,tsx,js,jsx}",
    "src/**/routes/**/*.{ts,tsx,js,jsx}",
)

DEFAULT_IGNORE: tuple[str, ...] = ("**/dist/**", "**/node_modules/**")


@dataclass(frozen=True)
class Route:
    """One discovered (method, path) endpoint plus where it was declared."""

    method: str                 # get, post, ... (lowercase, one of HTTP_METHODS)
    path: str                   # /users/{id}
    summary: str
    source_file: str            # scan-root relative, forward slashes
    line: int                   # 1-based
    origin: str                 # annotation | call-chain
    tag: Optional[str] = None
    folder: Optional[str] = None

    @property
    def dedup_key(self) -> str:
        return f"{self.method}:{self.path}:{self.tag or ''}"


class ScanOptions(BaseModel):
    cwd: Path = Field(default_factory=Path.cwd)
    patterns: list[str] = Field(default_factory=lambda: list(DEFAULT_PATTERNS))
    ignore: list[str] = Field(default_factory=lambda: list(DEFAULT_IGNORE))
    max_workers: int = Field(default=8, ge=1)

    @field_validator("cwd")
    @classmethod
    def _resolve_cwd(cls, v: Path) -> Path:
        return Path(v).expanduser().resolve()

    @field_validator("patterns", "ignore", mode="before")
    @classmethod
    def _none_means_default(cls, v, info):
        if v is None:
            return list(DEFAULT_PATTERNS if info.field_name == "patterns" else DEFAULT_IGNORE)
        return list(v)


class BuildOptions(BaseModel):
    title: str = "Auto Generated APIs"
    version: str = "1.0.0"
    description: Optional[str] = None
    server_url: Optional[str] = None
    default_response_description: Optional[str] = None
