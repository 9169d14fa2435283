from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping, Union

import yaml

from routedoc.domain.errors import DocumentLoadError
from routedoc.openapi.document import ApiDocument

logger = logging.getLogger(__name__)

FORMATS = ("json", "yaml")


def dump_document(document: Union[ApiDocument, Mapping[str, Any]], fmt: str = "json") -> str:
    data = document.to_dict() if isinstance(document, ApiDocument) else dict(document)
    fmt = fmt.lower().strip()
    if fmt == "json":
        return json.dumps(data, indent=2, ensure_ascii=False)
    if fmt in ("yaml", "yml"):
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    raise ValueError(f"format must be one of: {', '.join(FORMATS)}")


def parse_document(text: str, source: str = "<string>") -> dict[str, Any]:
    """Parse a JSON or YAML document (YAML is a superset, JSON is tried first)."""
    try:
        doc: Any = json.loads(text)
    except json.JSONDecodeError:
        try:
            doc = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise DocumentLoadError(f"{source} is neither valid JSON nor YAML: {e}") from e

    if not isinstance(doc, dict):
        raise DocumentLoadError(
            f"{source} is not an OpenAPI document: expected a mapping, got {type(doc).__name__}"
        )
    if "paths" not in doc:
        raise DocumentLoadError(f"{source} is not an OpenAPI document: missing 'paths'")
    return doc


def load_document(path: Path) -> dict[str, Any]:
    path = Path(path).expanduser()
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DocumentLoadError(f"Could not read {path}: {e.strerror or e}") from e
    logger.debug("Loaded document text from %s (%d bytes)", path, len(text))
    return parse_document(text, source=str(path))
