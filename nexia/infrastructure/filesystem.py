from __future__ import annotations

import os
import re
import uuid
from datetime import datetime
from pathlib import Path

from nexia.settings import RECOVERY_DIR

_UNSAFE_CHARS = re.compile(r'[<>:"/\\|?*\u0000-\u001f\s]+')


def atomic_write_text(path: Path, text: str, *, encoding: str = "utf-8") -> None:
    """
    Write to a temp file in the same directory, fsync, then replace().

    Readers never observe a half-written notebook.
    """
    path = Path(path)
    parent = path.parent
    parent.mkdir(parents=True, exist_ok=True)

    tmp_path = parent / f".{path.name}.tmp-{uuid.uuid4().hex}"
    try:
        with open(tmp_path, "w", encoding=encoding, newline="") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        tmp_path.replace(path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink(missing_ok=True)


def write_recovery_copy(target: Path, text: str, *, recovery_dir: Path = RECOVERY_DIR) -> Path:
    """
    Emergency copy used when the regular save failed.

    Writes a timestamped file into ~/.nexia/recovery/ and returns its path.
    """
    stem = _UNSAFE_CHARS.sub("_", Path(target).stem).strip("._") or "notebook"
    ts = datetime.now().strftime("%Y%m%d-%H%M%S")

    recovery_path = Path(recovery_dir) / f"{stem}.recovery.{ts}.json"
    atomic_write_text(recovery_path, text)
    return recovery_path
