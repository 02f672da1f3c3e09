from __future__ import annotations

import asyncio
import os
import shutil
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Tuple

import yaml

from .errors import BoardError

BOM = "\ufeff"


def today_str() -> str:
    # local date "YYYY-MM-DD"
    return datetime.now().strftime("%Y-%m-%d")


def ensure_dir(p: Path) -> None:
    p.parent.mkdir(parents=True, exist_ok=True)


def atomic_write_text(path: Path, text: str, make_backup: bool = True) -> None:
    ensure_dir(path)
    if make_backup and path.exists():
        backup = path.with_suffix(path.suffix + ".bak")
        shutil.copy2(path, backup)
    # temp file in the target directory so os.replace never crosses filesystems
    with tempfile.NamedTemporaryFile("w", delete=False, encoding="utf-8", newline="", dir=path.parent) as tmp:
        tmp.write(text)
        tmp.flush()
        os.fsync(tmp.fileno())
        tmp_path = Path(tmp.name)
    os.replace(tmp_path, path)


def run_in_thread(func, *args, **kwargs):
    loop = asyncio.get_running_loop()
    return loop.run_in_executor(None, lambda: func(*args, **kwargs))


def read_text(path: Path) -> str:
    # newline="" keeps "\r\n" intact so untouched lines are written back byte-for-byte
    try:
        with open(path, "r", encoding="utf-8", newline="") as fh:
            return fh.read()
    except UnicodeDecodeError as e:
        raise BoardError(
            f"{path} is not valid UTF-8 (byte offset {e.start})",
            "VALIDATION_ERROR",
            {"path": str(path), "offset": e.start},
        ) from e


def split_bom(raw: str) -> Tuple[str, str]:
    """Return (bom, text); the BOM is put back in front of the text on write."""
    if raw.startswith(BOM):
        return BOM, raw[len(BOM):]
    return "", raw


def write_text(path: Path, text: str, make_backup: bool = True) -> None:
    atomic_write_text(path, text, make_backup=make_backup)


def yaml_load(text: str) -> Dict[str, Any]:
    try:
        val = yaml.safe_load(text) or {}
    except yaml.YAMLError:
        return {}
    if not isinstance(val, dict):
        return {}
    return val
