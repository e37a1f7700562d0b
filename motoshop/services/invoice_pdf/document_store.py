"""
Invoice documents on the local filesystem.

Names follow a running history: ``historial.pdf``, ``historial1.pdf``,
``historial2.pdf``... The first free name is claimed with an exclusive create,
so two concurrent requests never end up with the same file. When the directory
cannot be listed the name falls back to ``historial_<epoch-ms>.pdf``.
"""
import logging
import os
import re
import tempfile
import time
from pathlib import Path
from typing import List, Optional

from flask import current_app
from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)

BASE_NAME = 'historial'
EXTENSION = '.pdf'
MAX_CLAIM_ATTEMPTS = 1000

_HISTORY_NAME = re.compile(rf'^{BASE_NAME}(\d*|_\d+){re.escape(EXTENSION)}$')


class DocumentStore:
    def __init__(self, directory):
        self.directory = Path(directory)

    @classmethod
    def from_app(cls, app=None):
        app = app or current_app
        return cls(app.config['INVOICES_DIR'])

    def list_names(self) -> List[str]:
        """Invoice document names currently in the directory, oldest history first."""
        names = [n for n in os.listdir(self.directory) if _HISTORY_NAME.match(n)]
        return sorted(names, key=_history_sort_key)

    def exists(self, name: str) -> bool:
        path = self.path_for(name)
        return path is not None and path.is_file()

    def path_for(self, name: str) -> Optional[Path]:
        """Absolute path of a stored document, or None for names outside the store."""
        if not name or secure_filename(name) != name:
            return None
        directory = self.directory.resolve()
        target = (directory / name).resolve()
        try:
            target.relative_to(directory)
        except ValueError:
            logger.warning("Attempted path traversal: %s", name)
            return None
        return target

    def next_name(self) -> str:
        try:
            existing = set(os.listdir(self.directory))
        except OSError as e:
            logger.warning(f"Could not list {self.directory}: {e}")
            return _timestamp_name()
        return _first_free(existing)

    def reserve(self) -> str:
        """
        Claim the next history name by creating an empty placeholder file.
        The placeholder is replaced by write().
        """
        self.directory.mkdir(parents=True, exist_ok=True)
        for _ in range(MAX_CLAIM_ATTEMPTS):
            name = self.next_name()
            try:
                fd = os.open(self.directory / name, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
            except FileExistsError:
                # lost the race for this name; list again
                continue
            os.close(fd)
            return name
        raise OSError(f"Could not reserve an invoice filename in {self.directory}")

    def write(self, name: str, content: bytes) -> Path:
        """Durably write ``content`` under ``name`` (temp file, fsync, atomic replace)."""
        target = self.path_for(name)
        if target is None:
            raise ValueError(f"Invalid document name: {name}")
        target.parent.mkdir(parents=True, exist_ok=True)

        tmp_path = None
        try:
            with tempfile.NamedTemporaryFile(mode='wb', dir=target.parent, delete=False,
                                             prefix='.tmp_', suffix=EXTENSION) as tmp:
                tmp.write(content)
                tmp.flush()
                os.fsync(tmp.fileno())
                tmp_path = tmp.name
            os.replace(tmp_path, target)
            tmp_path = None
        finally:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)

        logger.info(f"Invoice document written: {target}")
        return target

    def discard(self, name: str) -> None:
        """Remove a reserved name that never received content."""
        target = self.path_for(name)
        if target is None:
            return
        try:
            if target.is_file() and target.stat().st_size == 0:
                target.unlink()
        except OSError as e:
            logger.warning(f"Could not discard placeholder {target}: {e}")


def _first_free(existing) -> str:
    if f"{BASE_NAME}{EXTENSION}" not in existing:
        return f"{BASE_NAME}{EXTENSION}"
    i = 1
    while f"{BASE_NAME}{i}{EXTENSION}" in existing:
        i += 1
    return f"{BASE_NAME}{i}{EXTENSION}"


def _timestamp_name() -> str:
    return f"{BASE_NAME}_{int(time.time() * 1000)}{EXTENSION}"


def _history_sort_key(name):
    suffix = name[len(BASE_NAME):-len(EXTENSION)]
    if suffix == '':
        return (0, 0)
    if suffix.startswith('_'):
        return (2, int(suffix[1:]))
    return (1, int(suffix))
