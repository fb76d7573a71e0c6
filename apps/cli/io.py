"""CLI I/O helpers for atomic output writing and JSON inputs."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]
from pydantic import ValidationError

from core.grouping.models import ExistingDocumentType


def write_json_atomic(path: Path, payload: Any) -> None:
    """Write JSON atomically using a temporary file + replace."""

    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        mode="w",
        encoding="utf-8",
        dir=path.parent,
        delete=False,
        prefix=f"{path.name}.",
        suffix=".tmp",
    ) as tmp:
        tmp_path = Path(tmp.name)
        json.dump(payload, tmp, ensure_ascii=False, indent=2)

    tmp_path.replace(path)


def write_yaml_atomic(path: Path, payload: dict[str, Any]) -> None:
    """Write YAML atomically; used for rule exports."""

    path.parent.mkdir(parents=True, exist_ok=True)

    fd, raw_tmp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=f"{path.name}.",
        suffix=".tmp",
    )
    os.close(fd)
    tmp_path = Path(raw_tmp_path)

    try:
        with tmp_path.open("w", encoding="utf-8") as handle:
            yaml.safe_dump(payload, handle, allow_unicode=True, sort_keys=False)
        tmp_path.replace(path)
    except Exception:
        if tmp_path.exists():
            tmp_path.unlink(missing_ok=True)
        raise


def load_existing_types(path: Path) -> list[ExistingDocumentType]:
    """Read a JSON array of existing document types."""

    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError("Existing document types JSON must be an array")
    try:
        return [ExistingDocumentType.model_validate(item) for item in raw]
    except ValidationError as exc:
        raise ValueError(f"Invalid document type entry in {path}: {exc}") from exc
