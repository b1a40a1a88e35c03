"""Serialise flattened records to JSON."""

from __future__ import annotations

from datetime import UTC, datetime
import json
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from .models import DocRecord

_NOTICE = "-- DO NOT EDIT THIS FILE YOURSELF, THIS IS AUTO-GENERATED --"


def build_payload(
    records: Sequence[DocRecord],
    *,
    project: Optional[str],
    revision: str,
    version: Optional[str] = None,
) -> Dict[str, Any]:
    """Wrap a run's records in an envelope describing where they came from."""
    return {
        "notice": _NOTICE,
        "project": project,
        "version": version,
        "revision": revision,
        "generated_at": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
        "count": len(records),
        "records": [record.to_dict() for record in records],
    }


def dump_payload(payload: Dict[str, Any]) -> str:
    return json.dumps(payload, indent=2) + "\n"


def write_records(path: Path, payload: Dict[str, Any]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_payload(payload), encoding="utf-8")
    return path


def read_package_version(root: Path) -> Optional[str]:
    """Return the ``version`` declared by ``root/package.json``, if any."""
    manifest = root / "package.json"
    try:
        data = json.loads(manifest.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return None
    except (OSError, json.JSONDecodeError):
        return None
    if not isinstance(data, dict):
        return None
    version = data.get("version")
    return version if isinstance(version, str) and version else None


__all__ = ["build_payload", "dump_payload", "read_package_version", "write_records"]
