"""Utility functions for file I/O and common operations."""

import hashlib
import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

T = TypeVar('T', bound=BaseModel)
logger = logging.getLogger('sfl.utils')


def utc_now_iso() -> str:
    """Current UTC time as an ISO 8601 string."""
    return datetime.now(timezone.utc).isoformat()


def to_jsonable(data: Any) -> Any:
    """Convert Pydantic models to plain JSON-compatible data."""
    if isinstance(data, BaseModel):
        return data.model_dump(mode='json')
    return data


def content_version(data: Any) -> str:
    """
    Content hash used as a document version.

    Keys are sorted so equal documents always hash the same.
    """
    # Round-trip so int keys hash the same as after a reload from disk
    normalized = json.loads(json.dumps(to_jsonable(data)))
    encoded = json.dumps(normalized, sort_keys=True, ensure_ascii=False).encode('utf-8')
    return hashlib.sha1(encoded).hexdigest()


def validate_data(data: Any, schema: type[T], source: str = 'document') -> T:
    """
    Validate already-parsed JSON against a schema.

    Raises:
        ValueError: If schema validation fails
    """
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        logger.error(f'Schema validation failed for {source}: {e}')
        raise ValueError(f'Schema validation failed for {source}:\n{e}') from e


def load_json(
    path: Path | str,
    schema: type[T] | None = None,
) -> Any | T:
    """
    Load JSON file with optional schema validation.

    Args:
        path: Path to JSON file (str or Path object)
        schema: Optional Pydantic model to validate against

    Returns:
        Parsed JSON (validated if schema provided)

    Raises:
        FileNotFoundError: If file doesn't exist
        json.JSONDecodeError: If JSON is malformed
        ValueError: If schema validation fails

    Example:
        from sfl.schemas import LeagueConfig
        config = load_json('data/league_config.json', schema=LeagueConfig)
    """
    path = Path(path)

    logger.debug(f'Loading JSON from: {path}')

    if not path.exists():
        raise FileNotFoundError(f'File not found: {path}')

    try:
        with open(path, encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f'Invalid JSON in {path}: {e.msg} at position {e.pos}')
        raise json.JSONDecodeError(f'Invalid JSON in {path}: {e.msg}', e.doc, e.pos) from e

    if schema:
        return validate_data(data, schema, source=str(path))

    return data


def save_json(
    path: Path | str,
    data: Any,
    indent: int = 2,
) -> None:
    """
    Save data as JSON, replacing the file atomically.

    The document is written to a temporary file in the same directory and
    moved into place, so readers see either the old or the new content.

    Args:
        path: Path to write to (str or Path object)
        data: Data to serialize (JSON-serializable or Pydantic model)
        indent: Indentation level (default: 2 spaces)

    Raises:
        TypeError: If data is not JSON-serializable
        OSError: If file cannot be written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    logger.debug(f'Saving JSON to: {path}')

    json_data = to_jsonable(data)

    fd, tmp_name = tempfile.mkstemp(prefix=f'.{path.name}.', suffix='.tmp', dir=path.parent)
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            json.dump(json_data, f, indent=indent, ensure_ascii=False)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except TypeError as e:
        os.unlink(tmp_name)
        logger.error(f'Data is not JSON-serializable: {e}')
        raise TypeError(f'Data is not JSON-serializable: {e}') from e
    except OSError as e:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        logger.error(f'Failed to write file {path}: {e}')
        raise
