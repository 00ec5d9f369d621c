from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Optional


def write_temp_text(content: str, *, suffix: str, directory: Optional[Path] = None) -> Path:
    """Write content to a new uniquely named file and return its path.

    The file is removed again if writing fails for any reason.
    """
    fd, name = tempfile.mkstemp(suffix=suffix, dir=directory)
    path = Path(name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as fh:
            fh.write(content)
    except BaseException:
        path.unlink(missing_ok=True)
        raise
    return path
