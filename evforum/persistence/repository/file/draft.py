"""JSON-file draft repository."""

import asyncio
import hashlib
import re
from pathlib import Path
from typing import Optional

import logfire
from pydantic import ValidationError

from evforum.domain.model.draft import Draft
from evforum.domain.repository.draft import DraftRepository


class FileDraftRepository(DraftRepository):
    """Stores each draft as one JSON document in a directory.

    Drafts survive process restarts, which is what crash recovery needs.
    File access runs in a worker thread to keep the event loop free.
    """

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def _path(self, key: str) -> Path:
        readable = re.sub(r"[^A-Za-z0-9_.-]+", "_", key)[:80]
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()[:16]
        return self.directory / f"{readable}-{digest}.json"

    async def find_by_key(self, key: str) -> Optional[Draft]:
        """Load a saved draft. Unreadable files count as no draft."""
        path = self._path(key)
        try:
            raw = await asyncio.to_thread(path.read_text, encoding="utf-8")
        except FileNotFoundError:
            return None

        try:
            return Draft.model_validate_json(raw)
        except ValidationError as e:
            logfire.warn("Discarding unreadable draft", key=key, path=str(path), error=str(e))
            return None

    async def save(self, draft: Draft) -> Draft:
        """Write a draft atomically (temp file, then rename)."""
        path = self._path(draft.key)
        payload = draft.model_dump_json()

        def write() -> None:
            self.directory.mkdir(parents=True, exist_ok=True)
            tmp = path.with_suffix(".tmp")
            tmp.write_text(payload, encoding="utf-8")
            tmp.replace(path)

        await asyncio.to_thread(write)
        return draft

    async def delete(self, key: str) -> None:
        """Delete a saved draft."""
        await asyncio.to_thread(self._path(key).unlink, missing_ok=True)
