"""External editor invocation for comment text."""

import os
import shlex
import subprocess
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

DEFAULT_EDITOR = "nano"


def detect_editor(configured: Optional[str] = None) -> str:
    """Pick the configured editor, then $EDITOR, then $VISUAL, then nano."""
    return configured or os.getenv("EDITOR") or os.getenv("VISUAL") or DEFAULT_EDITOR


@contextmanager
def scratch_file(suffix: str = ".md") -> Iterator[Path]:
    """Create a temporary file that is removed on every exit path."""
    fd, name = tempfile.mkstemp(prefix="update-feedback-", suffix=suffix)
    os.close(fd)
    path = Path(name)
    
    try:
        yield path
    finally:
        path.unlink(missing_ok=True)


def edit_text(editor: str) -> Optional[str]:
    """Open a scratch file in the editor and return what was written.
    
    Returns None if the file was left empty. Bytes that are not valid UTF-8
    are replaced. KeyboardInterrupt propagates after the scratch file has
    been removed.
    
    Raises:
        OSError: if the editor cannot be started.
    """
    with scratch_file() as path:
        subprocess.run([*shlex.split(editor), str(path)], check=False)
        text = path.read_text(encoding="utf-8", errors="replace").strip()
    
    return text or None
