"""Unit tests for the HTTP routes, run against the mocked container."""

from uuid import uuid4

import httpx
import pytest
import pytest_asyncio

from evforum.adapter.forum_api import MockForumBackend
from evforum.config import MEGABYTE
from evforum.domain.service import ThreadService
from evforum.interface.api.app import create_app
from tests.conftest import make_reply, make_thread
from tests.di import build_test_container

AUTHOR = {"X-Author-Id": str(uuid4())}
CONTENT = "Preconditioning before a supercharger stop helps a lot."


@pytest_asyncio.fixture
async def container():
    container = build_test_container()
    yield container
    await container.close()


@pytest_asyncio.fixture
async def client(container):
    app = create_app(container)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def _seed_thread(container, **overrides):
    async with container() as request_container:
        thread_service = await request_container.get(ThreadService)
        return await thread_service.create_thread(make_thread(**overrides))


class TestReadRoutes:
    """Tests for health, preview and thread reads."""

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_preview(self, client):
        response = await client.post(
            "/markdown/preview", json={"content": "[site](javascript:alert(1))"}
        )

        assert response.status_code == 200
        assert "<a " not in response.json()["html"]

    @pytest.mark.asyncio
    async def test_list_and_get_thread(self, client, container):
        tree = await _seed_thread(container)

        listed = await client.get("/threads", params={"sort": "newest"})
        fetched = await client.get(f"/threads/{tree.thread.id}")

        assert [t["thread_id"] for t in listed.json()["threads"]] == [str(tree.thread.id)]
        assert fetched.json()["thread"]["title"] == tree.thread.title
        assert fetched.json()["replies"] == []

    @pytest.mark.asyncio
    async def test_unknown_thread_is_404(self, client):
        assert (await client.get(f"/threads/{uuid4()}")).status_code == 404
        assert (await client.get("/threads/not-a-uuid")).status_code == 404


class TestSubmissionRoutes:
    """Tests for draft, attachment and submission routes."""

    @pytest.mark.asyncio
    async def test_draft_attach_and_submit_reply(self, client, container):
        # Arrange
        tree = await _seed_thread(container)
        thread_id = str(tree.thread.id)
        key = f"reply:{thread_id}"
        saved = await client.put(
            f"/drafts/{key}", json={"content": CONTENT, "thread_id": thread_id}
        )
        attached = await client.post(
            "/attachments",
            data={"draft_key": key},
            files=[("files", ("plug.png", b"\x89PNG", "image/png"))],
        )

        # Act
        response = await client.post(
            f"/threads/{thread_id}/replies", json={"draft_key": key}, headers=AUTHOR
        )

        # Assert
        assert saved.status_code == 200
        assert attached.status_code == 202
        assert response.status_code == 201
        body = response.json()
        assert body["reply"]["content"] == CONTENT
        assert [a["filename"] for a in body["reply"]["attachments"]] == ["plug.png"]
        assert body["warnings"] == []
        assert (await client.get(f"/drafts/{key}")).status_code == 404

    @pytest.mark.asyncio
    async def test_missing_author_is_401(self, client, container):
        tree = await _seed_thread(container)

        response = await client.post(
            f"/threads/{tree.thread.id}/replies", json={"draft_key": "any"}
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_short_reply_is_400(self, client, container):
        tree = await _seed_thread(container)
        thread_id = str(tree.thread.id)
        await client.put("/drafts/k", json={"content": "123456789", "thread_id": thread_id})

        response = await client.post(
            f"/threads/{thread_id}/replies", json={"draft_key": "k"}, headers=AUTHOR
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_max_depth_is_409(self, client, container):
        async with container() as request_container:
            thread_service = await request_container.get(ThreadService)
            tree = await thread_service.create_thread(make_thread())
            level0 = await thread_service.add_reply(tree, make_reply(tree.thread))
            level1 = await thread_service.add_reply(tree, make_reply(tree.thread, level0))
            level2 = await thread_service.add_reply(tree, make_reply(tree.thread, level1))
        thread_id = str(tree.thread.id)
        await client.put(
            "/drafts/k",
            json={"content": CONTENT, "thread_id": thread_id, "parent_id": str(level2.id)},
        )

        response = await client.post(
            f"/threads/{thread_id}/replies", json={"draft_key": "k"}, headers=AUTHOR
        )

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_backend_failure_is_502_with_draft(self, client, container):
        backend = await container.get(MockForumBackend)
        backend.fail_creation = True
        await client.put(
            "/drafts/t", json={"content": "Range in winter?", "title": "Winter"}
        )

        response = await client.post("/threads", json={"draft_key": "t"}, headers=AUTHOR)

        assert response.status_code == 502
        detail = response.json()["detail"]
        assert detail["draft"]["content"] == "Range in winter?"
        assert (await client.get("/drafts/t")).json()["draft"]["title"] == "Winter"

    @pytest.mark.asyncio
    async def test_non_author_edit_is_403(self, client, container):
        async with container() as request_container:
            thread_service = await request_container.get(ThreadService)
            tree = await thread_service.create_thread(make_thread())
            reply = await thread_service.add_reply(tree, make_reply(tree.thread))

        response = await client.patch(
            f"/replies/{reply.id}", json={"content": CONTENT}, headers=AUTHOR
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_bad_thread_id_in_draft_is_400(self, client):
        response = await client.put(
            "/drafts/k", json={"content": "x", "thread_id": "not-a-uuid"}
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_format_and_undo(self, client):
        await client.put("/drafts/k", json={"content": "range"})

        formatted = await client.post(
            "/drafts/k/format", json={"command": "bold", "start": 0, "end": 5}
        )
        undone = await client.post("/drafts/k/undo")

        assert formatted.json()["draft"]["content"] == "**range**"
        assert formatted.json()["cursor"] == 7
        assert undone.json()["draft"]["content"] == "range"
        assert undone.json()["can_redo"] is True


class TestAttachmentRoutes:
    """Tests for the multipart attachment routes."""

    @pytest.mark.asyncio
    async def test_alt_text_and_caption_are_kept(self, client):
        await client.put("/drafts/k", json={"content": "", "thread_id": str(uuid4())})

        response = await client.post(
            "/attachments",
            data={"draft_key": "k", "alt_text": "Type 2 plug", "caption": "At home"},
            files=[("files", ("plug.png", b"\x89PNG", "image/png"))],
        )

        assert response.status_code == 202
        (attachment,) = response.json()["attachments"]
        assert attachment["alt_text"] == "Type 2 plug"
        assert attachment["caption"] == "At home"

    @pytest.mark.asyncio
    async def test_bad_filename_does_not_abort_batch(self, client):
        await client.put("/drafts/k", json={"content": "", "thread_id": str(uuid4())})
        long_name = "a" * 300 + ".png"

        response = await client.post(
            "/attachments",
            data={"draft_key": "k"},
            files=[
                ("files", (long_name, b"\x89PNG", "image/png")),
                ("files", ("ok.png", b"\x89PNG", "image/png")),
            ],
        )

        assert response.status_code == 202
        body = response.json()
        assert [a["filename"] for a in body["attachments"]] == ["ok.png"]
        assert [r["limit"] for r in body["rejections"]] == ["name"]
        assert body["rejections"][0]["filename"] == long_name[:255]
        draft = (await client.get("/drafts/k")).json()["draft"]
        assert draft["pending_attachment_ids"] == [body["attachments"][0]["attachment_id"]]

    @pytest.mark.asyncio
    async def test_file_over_every_limit_is_rejected(self, client):
        await client.put("/drafts/k", json={"content": "", "thread_id": str(uuid4())})
        too_big = b"\0" * (10 * MEGABYTE + 1)

        response = await client.post(
            "/attachments",
            data={"draft_key": "k", "context": "post_attachment"},
            files=[
                ("files", ("log.bin", too_big, "application/octet-stream")),
                ("files", ("ok.png", b"\x89PNG", "image/png")),
            ],
        )

        assert response.status_code == 202
        body = response.json()
        assert [a["filename"] for a in body["attachments"]] == ["ok.png"]
        assert [(r["filename"], r["limit"]) for r in body["rejections"]] == [
            ("log.bin", "size")
        ]

    @pytest.mark.asyncio
    async def test_other_drafts_attachment_is_404(self, client):
        await client.put("/drafts/victim", json={"content": "", "thread_id": str(uuid4())})
        await client.put("/drafts/attacker", json={"content": "", "thread_id": str(uuid4())})
        attached = await client.post(
            "/attachments",
            data={"draft_key": "victim"},
            files=[("files", ("v.png", b"\x89PNG", "image/png"))],
        )
        attachment_id = attached.json()["attachments"][0]["attachment_id"]

        response = await client.delete(
            f"/attachments/{attachment_id}", params={"draft_key": "attacker"}
        )

        assert response.status_code == 404
        state = (await client.get(f"/attachments/{attachment_id}")).json()
        assert state["attachment"]["state"] != "removed"
