"""
Image references -> raw bytes.

A reference is an absolute http(s) URL or a path. Paths starting with ``/`` are
site-relative (``/uploads/services/x.jpg``) and resolve against SITE_ROOT, as
do plain relative paths. Every failure mode ends as ``None``; callers treat
that as "no image".
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, List, Optional

import requests
from flask import current_app

logger = logging.getLogger(__name__)

UPLOADS_PREFIX = 'uploads'


def split_refs(value) -> List[str]:
    """``"a.jpg, ,b.jpg"`` -> ``["a.jpg", "b.jpg"]``"""
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        parts = value
    else:
        parts = str(value).split(',')
    return [str(p).strip() for p in parts if p and str(p).strip()]


class ImageResolver:
    def __init__(self, site_root, timeout: float = 10, max_workers: int = 4, session=None,
                 uploads_dir=None):
        self.site_root = Path(site_root).resolve()
        self.uploads_dir = Path(uploads_dir).resolve() if uploads_dir else self.site_root / UPLOADS_PREFIX
        self.timeout = timeout
        self.max_workers = max(1, int(max_workers))
        self.session = session or requests

    @classmethod
    def from_app(cls, app=None):
        app = app or current_app
        return cls(
            app.config['SITE_ROOT'],
            timeout=app.config.get('IMAGE_FETCH_TIMEOUT', 10),
            max_workers=app.config.get('IMAGE_FETCH_WORKERS', 4),
            uploads_dir=app.config.get('UPLOADS_DIR'),
        )

    def resolve(self, ref) -> Optional[bytes]:
        if not ref or not isinstance(ref, str):
            return None
        ref = ref.strip()
        if not ref:
            return None
        try:
            if ref.lower().startswith(('http://', 'https://')):
                return self._fetch_remote(ref)
            return self._read_local(ref)
        except Exception as e:
            logger.warning(f"Unexpected error resolving image {ref!r}: {e}")
            return None

    def resolve_all(self, refs: Iterable[str]) -> List[Optional[bytes]]:
        """Resolve several references concurrently; output follows input order."""
        refs = list(refs)
        if not refs:
            return []
        if len(refs) == 1:
            return [self.resolve(refs[0])]
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(refs))) as pool:
            return list(pool.map(self.resolve, refs))

    def _fetch_remote(self, url: str) -> Optional[bytes]:
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning(f"Could not fetch image {url}: {e}")
            return None
        return response.content or None

    def _read_local(self, ref: str) -> Optional[bytes]:
        relative = ref.lstrip('/')
        root = self.site_root
        if relative.startswith(UPLOADS_PREFIX + '/'):
            # /uploads/... is served from UPLOADS_DIR, wherever that lives
            root = self.uploads_dir
            relative = relative[len(UPLOADS_PREFIX) + 1:]
        target = (root / relative).resolve()
        try:
            target.relative_to(root)
        except ValueError:
            logger.warning("Attempted path traversal: %s", ref)
            return None
        if not target.is_file():
            logger.info(f"Image not found: {target}")
            return None
        try:
            return target.read_bytes() or None
        except OSError as e:
            logger.warning(f"Could not read image {target}: {e}")
            return None
