"""Draft authoring domain service."""

from typing import Iterable, Optional
from uuid import uuid4

from evforum.config import CompositionSettings
from evforum.domain.error import ValidationError
from evforum.domain.model.draft import Draft
from evforum.domain.value import (
    AttachmentId,
    FormatCommand,
    ReplyId,
    Selection,
    TagName,
    TempOwnerId,
    ThreadId,
)
from evforum.domain.value.common import ValueObject

from .base import Service

TABLE_TEMPLATE = (
    "| Column 1 | Column 2 | Column 3 |\n"
    "|----------|----------|----------|\n"
    "| Cell 1   | Cell 2   | Cell 3   |\n"
    "| Cell 4   | Cell 5   | Cell 6   |"
)

# (before, after) inserted around the selection
_WRAPPERS: dict[FormatCommand, tuple[str, str]] = {
    FormatCommand.HEADING_1: ("# ", ""),
    FormatCommand.HEADING_2: ("## ", ""),
    FormatCommand.HEADING_3: ("### ", ""),
    FormatCommand.BOLD: ("**", "**"),
    FormatCommand.ITALIC: ("*", "*"),
    FormatCommand.STRIKETHROUGH: ("~~", "~~"),
    FormatCommand.INLINE_CODE: ("`", "`"),
    FormatCommand.QUOTE: ("> ", ""),
    FormatCommand.BULLET_LIST: ("- ", ""),
    FormatCommand.NUMBERED_LIST: ("1. ", ""),
    FormatCommand.IMAGE: ("![alt text](", ")"),
    FormatCommand.RULE: ("\n---\n", ""),
}


class FormatResult(ValueObject):
    """Draft after a formatting command, with the new cursor position."""

    draft: Draft
    cursor: int


class DraftService(Service):
    """Domain service for editing drafts.

    All operations are pure: they take a draft and return a new one.
    Every content change goes through `edit`, which records undo history.
    """

    def __init__(self, composition_settings: CompositionSettings) -> None:
        """Initialize draft service.

        Args:
            composition_settings: Authoring rules (history limit)
        """
        self.composition_settings = composition_settings

    def new_reply_draft(
        self,
        thread_id: ThreadId,
        parent_id: Optional[ReplyId] = None,
        key: Optional[str] = None,
    ) -> Draft:
        """Start a draft replying to a thread or to one of its replies."""
        if key is None:
            key = f"reply:{thread_id}:{parent_id or 'thread'}"
        return Draft(key=key, thread_id=thread_id, parent_id=parent_id)

    def new_thread_draft(
        self,
        key: Optional[str] = None,
        title: str = "",
        tags: Iterable[TagName] = (),
    ) -> Draft:
        """Start a draft for a new thread."""
        if key is None:
            key = f"thread:{uuid4()}"
        return Draft(key=key, title=title, tags=tuple(tags))

    def edit(self, draft: Draft, content: str) -> Draft:
        """Replace the draft content, recording it in the undo history.

        Redo entries past the current position are discarded. An edit that
        does not change the content records nothing.
        """
        if content == draft.history[draft.history_index]:
            return draft.model_copy(update={"content": content})

        history = [*draft.history[: draft.history_index + 1], content]
        limit = self.composition_settings.history_limit
        if len(history) > limit:
            history = history[-limit:]
        return draft.model_copy(
            update={
                "content": content,
                "history": tuple(history),
                "history_index": len(history) - 1,
            }
        )

    def can_undo(self, draft: Draft) -> bool:
        return draft.history_index > 0

    def can_redo(self, draft: Draft) -> bool:
        return draft.history_index < len(draft.history) - 1

    def undo(self, draft: Draft) -> Draft:
        if not self.can_undo(draft):
            return draft
        index = draft.history_index - 1
        return draft.model_copy(
            update={"history_index": index, "content": draft.history[index]}
        )

    def redo(self, draft: Draft) -> Draft:
        if not self.can_redo(draft):
            return draft
        index = draft.history_index + 1
        return draft.model_copy(
            update={"history_index": index, "content": draft.history[index]}
        )

    def apply_format(
        self,
        draft: Draft,
        command: FormatCommand,
        selection: Selection,
        language: str = "",
        url: str = "",
        text: str = "",
    ) -> FormatResult:
        """Apply a formatting toolbar command at the selection.

        Markup is inserted around the selected text; the cursor ends up
        after the selected text, before any closing markup.

        Args:
            draft: Draft to format
            command: Toolbar command
            selection: Selected range (clamped to the content)
            language: Language tag for CODE_BLOCK
            url: Target for LINK
            text: Link text for LINK, defaults to the selection

        Returns:
            The edited draft and the new cursor position
        """
        content = draft.content
        start = min(selection.start, len(content))
        end = min(selection.end, len(content))
        selected = content[start:end]

        if command is FormatCommand.CODE_BLOCK:
            before, after = f"```{language}\n", "\n```"
        elif command is FormatCommand.TABLE:
            before, after = TABLE_TEMPLATE, ""
        elif command is FormatCommand.LINK:
            label = text or selected or "link text"
            before, after = f"[{label}]({url})", ""
            # The link replaces the selection it was built from
            selected = ""
        else:
            before, after = _WRAPPERS[command]

        edited = self.edit(draft, content[:start] + before + selected + after + content[end:])
        return FormatResult(draft=edited, cursor=start + len(before) + len(selected))

    def set_title(self, draft: Draft, title: str) -> Draft:
        return draft.model_copy(update={"title": title})

    def set_tags(self, draft: Draft, tags: Iterable[TagName]) -> Draft:
        return draft.model_copy(update={"tags": tuple(dict.fromkeys(tags))})

    def attach(self, draft: Draft, attachment_ids: Iterable[AttachmentId]) -> Draft:
        """Record attachments on the draft, ignoring ones already recorded."""
        ids = tuple(dict.fromkeys((*draft.pending_attachment_ids, *attachment_ids)))
        return draft.model_copy(update={"pending_attachment_ids": ids})

    def detach(self, draft: Draft, attachment_id: AttachmentId) -> Draft:
        ids = tuple(i for i in draft.pending_attachment_ids if i != attachment_id)
        return draft.model_copy(update={"pending_attachment_ids": ids})

    def clear(self, draft: Draft) -> Draft:
        """Empty the draft after a successful submission.

        The cleared draft keeps its key and target but gets a fresh temp
        owner, since the old one's uploads now belong to the new post.
        """
        return Draft(
            key=draft.key,
            thread_id=draft.thread_id,
            parent_id=draft.parent_id,
            title="" if draft.is_thread else None,
            temp_owner_id=TempOwnerId(uuid4()),
        )

    def check_reply_content(self, content: str) -> str:
        """Check reply content against the length rules.

        Lengths are measured after trimming surrounding whitespace.

        Returns:
            The trimmed content

        Raises:
            ValidationError: If the content is empty, too short or too long
        """
        settings = self.composition_settings
        trimmed = content.strip()
        if not trimmed:
            raise ValidationError("Reply content cannot be empty")
        if len(trimmed) < settings.reply_min_length:
            raise ValidationError(
                f"Reply must be at least {settings.reply_min_length} characters"
            )
        if len(trimmed) > settings.reply_max_length:
            raise ValidationError(
                f"Reply must be at most {settings.reply_max_length} characters"
            )
        return trimmed

    def check_thread(self, draft: Draft) -> tuple[str, str]:
        """Check a thread draft's title and content.

        Returns:
            The trimmed title and content

        Raises:
            ValidationError: If the title or content breaks a rule
        """
        settings = self.composition_settings
        title = (draft.title or "").strip()
        if not title:
            raise ValidationError("Thread title is required")
        if len(title) > settings.title_max_length:
            raise ValidationError(
                f"Thread title must be at most {settings.title_max_length} characters"
            )
        content = draft.content.strip()
        if not content:
            raise ValidationError("Thread content cannot be empty")
        if len(content) > settings.thread_max_length:
            raise ValidationError(
                f"Thread content must be at most {settings.thread_max_length} characters"
            )
        return title, content
