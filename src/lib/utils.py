"""Filesystem helpers for writing backup files."""
from __future__ import annotations
import json, os, logging
from pathlib import Path
from typing import Any, Mapping

log = logging.getLogger(__name__)

def ensure_dir(path: Path) -> Path:
	"""Create `path` and any missing parents; no-op if it already exists."""
	path = Path(path)
	path.mkdir(parents=True, exist_ok=True)
	return path

def to_pretty_json(obj: Mapping[str, Any]) -> str:
	return json.dumps(obj, indent=2, ensure_ascii=False) + "\n"

def write_json(path: Path, obj: Mapping[str, Any]) -> Path:
	"""Serialise `obj` and replace `path` with it in one step.

	The document is written to a sibling temp file first, so readers never
	see a half-written backup. An existing file is overwritten.
	"""
	path = Path(path)
	tmp = path.with_name(path.name + '.tmp')
	try:
		tmp.write_bytes(to_pretty_json(obj).encode('utf-8'))
		os.replace(tmp, path)
	except OSError:
		tmp.unlink(missing_ok=True)
		raise
	log.debug("wrote %s", path)
	return path
