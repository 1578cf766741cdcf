"""Forum backend REST client.

Talks to the forum REST API for post creation and file storage. The API
wraps results as `{"success": ..., "data": {...}}`; both wrapped and bare
payloads are accepted.
"""

import asyncio
from typing import Any, Optional
from uuid import UUID, uuid4

import httpx
import logfire

from evforum.adapter.error import ForumApiError
from evforum.domain.model.attachment import FileUpload
from evforum.domain.service.backend import (
    CreatedPost,
    ForumBackend,
    UploadedFile,
    UploadMetadata,
)
from evforum.domain.value import EntityId, ReplyId, TagName, ThreadId, utc_now


def _unwrap(payload: Any, *keys: str) -> dict:
    """Dig the entity out of an API envelope."""
    if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
        payload = payload["data"]
    for key in keys:
        if isinstance(payload, dict) and isinstance(payload.get(key), dict):
            return payload[key]
    if not isinstance(payload, dict):
        raise ForumApiError(f"Unexpected response payload: {payload!r}")
    return payload


class HttpForumBackend(ForumBackend):
    """Forum backend over HTTP (httpx).

    One AsyncClient is shared for the lifetime of the backend; call
    `aclose()` on shutdown.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize forum API client.

        Args:
            base_url: API root, e.g. https://forum.example/api
            timeout: Request timeout in seconds
            token: Bearer token sent with every request (optional)
            transport: Custom transport (tests use httpx.MockTransport)
        """
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self.client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers=headers,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logfire.error("Forum API HTTP error", method=method, url=url, error=str(e))
            raise ForumApiError(f"HTTP error calling {method} {url}: {e}")

        if response.status_code >= 400:
            logfire.error(
                "Forum API request failed",
                method=method,
                url=url,
                status_code=response.status_code,
                error=response.text,
            )
            raise ForumApiError(
                f"{method} {url} failed: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise ForumApiError(f"Invalid JSON from {method} {url}: {e}")

    async def create_post(
        self,
        content: str,
        thread_id: Optional[ThreadId] = None,
        parent_id: Optional[ReplyId] = None,
        title: Optional[str] = None,
        tags: tuple[TagName, ...] = (),
    ) -> CreatedPost:
        """Create a thread (POST /forum/threads) or reply (POST /forum/replies)."""
        if thread_id is None:
            payload = await self._request(
                "POST",
                "/forum/threads",
                json={
                    "title": title,
                    "content": content,
                    "tags": [tag.root for tag in tags],
                },
            )
            entity = _unwrap(payload, "thread", "post")
        else:
            payload = await self._request(
                "POST",
                "/forum/replies",
                json={
                    "thread_id": str(thread_id),
                    "parent_id": str(parent_id) if parent_id else None,
                    "content": content,
                },
            )
            entity = _unwrap(payload, "reply")

        try:
            created = CreatedPost(
                id=EntityId(UUID(str(entity["id"]))),
                created_at=entity.get("created_at") or utc_now(),
            )
        except (KeyError, ValueError) as e:
            raise ForumApiError(f"Malformed create response: {e}")

        logfire.info(
            "Forum post created",
            post_id=str(created.id),
            thread_id=str(thread_id) if thread_id else None,
        )
        return created

    async def upload_file(self, file: FileUpload, metadata: UploadMetadata) -> UploadedFile:
        """Upload a file (POST /upload/single, multipart)."""
        form = {
            "upload_type": "image" if file.mime_type.startswith("image/") else "document",
            "entity_type": metadata.entity_type.value,
            "entity_id": str(metadata.temp_owner_id),
        }
        if metadata.alt_text:
            form["alt_text"] = metadata.alt_text
        if metadata.caption:
            form["caption"] = metadata.caption

        payload = await self._request(
            "POST",
            "/upload/single",
            data=form,
            files={"file": (file.filename, file.data, file.mime_type)},
        )
        record = _unwrap(payload, "file")
        try:
            return UploadedFile(
                id=str(record["id"]),
                file_path=record["file_path"],
                mime_type=record.get("mime_type", file.mime_type),
                size_bytes=record.get("file_size", file.size_bytes),
            )
        except KeyError as e:
            raise ForumApiError(f"Malformed upload response, missing {e}")

    async def update_file_association(self, file_id: str, real_owner_id: EntityId) -> bool:
        """Re-link a file to its owner (PUT /upload/files/{id})."""
        payload = await self._request(
            "PUT",
            f"/upload/files/{file_id}",
            json={"entity_id": str(real_owner_id)},
        )
        return bool(payload.get("success", True)) if isinstance(payload, dict) else True

    async def update_post(self, post_id: EntityId, content: str) -> None:
        """Replace reply content (PUT /forum/replies/{id})."""
        await self._request(
            "PUT", f"/forum/replies/{post_id}", json={"content": content}
        )


class MockForumBackend(ForumBackend):
    """In-memory forum backend for testing.

    Deterministic unless told to fail: `fail_creation`, `fail_upload_for`
    and `fail_association_for` inject failures. `upload_gate`, when set,
    holds every upload until the event is set. All calls are recorded in
    `calls` for assertions.
    """

    def __init__(self) -> None:
        self.posts: dict[EntityId, dict[str, Any]] = {}
        self.files: dict[str, UploadedFile] = {}
        self.associations: dict[str, EntityId] = {}
        self.calls: list[tuple[str, Any]] = []

        self.fail_creation = False
        self.failing_uploads: set[str] = set()
        self.failing_associations: set[str] = set()
        self.rejected_associations: set[str] = set()
        self.upload_gate: Optional[asyncio.Event] = None

    def fail_upload_for(self, filename: str) -> None:
        self.failing_uploads.add(filename)

    def fail_association_for(self, filename: str, raise_error: bool = True) -> None:
        """Make association of files with this name fail (raise) or be rejected."""
        if raise_error:
            self.failing_associations.add(filename)
        else:
            self.rejected_associations.add(filename)

    async def create_post(
        self,
        content: str,
        thread_id: Optional[ThreadId] = None,
        parent_id: Optional[ReplyId] = None,
        title: Optional[str] = None,
        tags: tuple[TagName, ...] = (),
    ) -> CreatedPost:
        self.calls.append(("create_post", content))
        if self.fail_creation:
            raise ForumApiError("Mock creation failure", status_code=503)

        created = CreatedPost(id=EntityId(uuid4()), created_at=utc_now())
        self.posts[created.id] = {
            "content": content,
            "thread_id": thread_id,
            "parent_id": parent_id,
            "title": title,
            "tags": tags,
        }
        return created

    async def upload_file(self, file: FileUpload, metadata: UploadMetadata) -> UploadedFile:
        self.calls.append(("upload_file", file.filename))
        if self.upload_gate is not None:
            await self.upload_gate.wait()
        if file.filename in self.failing_uploads:
            raise ForumApiError(f"Mock upload failure for {file.filename}")

        uploaded = UploadedFile(
            id=f"file-{uuid4()}",
            file_path=f"https://storage.example/uploads/{file.filename}",
            mime_type=file.mime_type,
            size_bytes=file.size_bytes,
        )
        self.files[uploaded.id] = uploaded
        return uploaded

    async def update_file_association(self, file_id: str, real_owner_id: EntityId) -> bool:
        self.calls.append(("update_file_association", file_id))
        filename = self.files[file_id].file_path.rsplit("/", 1)[-1]
        if filename in self.failing_associations:
            raise ForumApiError(f"Mock association failure for {filename}")
        if filename in self.rejected_associations:
            return False
        self.associations[file_id] = real_owner_id
        return True

    async def update_post(self, post_id: EntityId, content: str) -> None:
        self.calls.append(("update_post", content))
        if post_id in self.posts:
            self.posts[post_id]["content"] = content
