"""Application configuration."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from evforum.domain.value import ThreadSortOrder

MEGABYTE = 1024 * 1024


class ForumApiSettings(BaseModel):
    """Forum backend (REST API) configuration."""

    base_url: str = "http://localhost:4001/api"
    timeout: float = 30.0

    # Service token forwarded as a bearer token (optional)
    # Can be set via FORUM_API__TOKEN env var
    token: str | None = None


class AttachmentLimits(BaseModel):
    """Upload constraints for one attachment context."""

    max_size_bytes: int
    # None means unbounded
    max_count: int | None = None
    # None means any type, otherwise a MIME prefix such as "image/"
    mime_prefix: str | None = None


class AttachmentSettings(BaseModel):
    """Attachment limits per context."""

    # General post attachments: any file type, 10MB each, unbounded count
    post_attachment: AttachmentLimits = AttachmentLimits(max_size_bytes=10 * MEGABYTE)

    # Inline images on replies: images only, 5MB each, at most 3 per reply
    reply_image: AttachmentLimits = AttachmentLimits(
        max_size_bytes=5 * MEGABYTE, max_count=3, mime_prefix="image/"
    )

    # Thread images: images only, 5MB each, at most 5 per thread
    thread_image: AttachmentLimits = AttachmentLimits(
        max_size_bytes=5 * MEGABYTE, max_count=5, mime_prefix="image/"
    )

    @property
    def largest_size_bytes(self) -> int:
        """Size no context accepts a file above."""
        return max(
            self.post_attachment.max_size_bytes,
            self.reply_image.max_size_bytes,
            self.thread_image.max_size_bytes,
        )


class CompositionSettings(BaseModel):
    """Authoring and submission rules."""

    reply_min_length: int = 10
    reply_max_length: int = 5000
    thread_max_length: int = 10000
    title_max_length: int = 200

    # Undo/redo history entries kept per draft
    history_limit: int = 50


class ThreadListSettings(BaseModel):
    """Thread list ordering configuration."""

    # Threads with more views than this are "trending"
    trending_view_threshold: int = 2000

    # Used when a listing request does not name an order
    default_sort: ThreadSortOrder = ThreadSortOrder.LATEST_ACTIVITY


class DraftSettings(BaseModel):
    """Draft autosave configuration."""

    # "memory" keeps drafts for the lifetime of the process,
    # "file" writes one JSON document per draft into `directory`
    storage: Literal["memory", "file"] = "memory"
    directory: Path = Path(".drafts")


class ObservabilitySettings(BaseModel):
    """Observability configuration for Logfire."""

    # Logfire API token (optional - if not set, logs only go to console)
    # Can be set via OBSERVABILITY__LOGFIRE_TOKEN env var
    logfire_token: str | None = None

    # Whether to send telemetry to Logfire cloud
    # If None, will auto-determine: sends if token is present, otherwise console-only
    send_to_logfire: bool | None = None


class Settings(BaseSettings):
    """Application settings.

    Set environment variables to override, using `__` for nested values:

        ENVIRONMENT=production
        FORUM_API__BASE_URL=https://api.evcommunity.example/api
        ATTACHMENTS__REPLY_IMAGE__MAX_COUNT=4
        DRAFTS__STORAGE=file
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",  # Allows FORUM_API__BASE_URL syntax
    )

    environment: Literal["test", "development", "staging", "production"] = "development"
    debug: bool = False

    # Git commit SHA (loaded from version.txt file or defaults to "unknown")
    git_sha: str = "unknown"

    host: str = "localhost"
    port: int = 8000

    # Origins allowed to call the API from a browser
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Nested settings
    forum_api: ForumApiSettings = ForumApiSettings()
    attachments: AttachmentSettings = AttachmentSettings()
    composition: CompositionSettings = CompositionSettings()
    thread_list: ThreadListSettings = ThreadListSettings()
    drafts: DraftSettings = DraftSettings()
    observability: ObservabilitySettings = ObservabilitySettings()

    @model_validator(mode="after")
    def load_version(self) -> "Settings":
        """Load the git SHA from the version file when deployed."""
        self.git_sha = self._load_git_sha()
        return self

    @staticmethod
    def _load_git_sha() -> str:
        """Load git SHA from version file.

        Returns:
            Git SHA if version file exists, otherwise "unknown"
        """
        version_file = Path("/app/version.txt")
        if version_file.exists():
            try:
                return version_file.read_text().strip()
            except OSError:
                return "unknown"
        # In development, version file may not exist
        return "unknown"
