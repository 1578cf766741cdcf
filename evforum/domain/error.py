"""Domain layer errors."""

from typing import TYPE_CHECKING, Any

from evforum.domain.value import AttachmentLimit

if TYPE_CHECKING:
    from evforum.domain.model.draft import Draft


class DomainError(Exception):
    """Base domain error."""

    pass


class SubmissionError(DomainError):
    """Base of errors that end a submission attempt."""

    pass


class ValidationError(SubmissionError):
    """Content or attachment rule violated. Raised before any side effect."""

    pass


class AttachmentValidationError(ValidationError):
    """A selected file breaks one of the upload limits."""

    def __init__(self, filename: str, limit: AttachmentLimit, message: str):
        self.filename = filename
        self.limit = limit
        super().__init__(f"{filename}: {message}")


class CreationError(SubmissionError):
    """The backend failed to persist a post.

    Carries the draft untouched so the author's text is never lost.
    """

    def __init__(self, message: str, draft: "Draft | None" = None):
        self.draft = draft
        super().__init__(message)


class InvariantViolation(DomainError):
    """A structural contract of the reply tree was broken."""

    pass


class UploadError(DomainError):
    """Transferring one file failed. Never fatal to a submission."""

    def __init__(self, filename: str, reason: str):
        self.filename = filename
        self.reason = reason
        super().__init__(f"Upload of {filename} failed: {reason}")


class BindError(DomainError):
    """Associating one uploaded file with its owner failed."""

    def __init__(self, filename: str, reason: str):
        self.filename = filename
        self.reason = reason
        super().__init__(f"Binding {filename} failed: {reason}")


class NotAuthorizedError(DomainError):
    """Raised when a user attempts to edit content they don't own."""

    def __init__(self, resource: str, resource_id: Any, user_id: Any):
        super().__init__(
            f"User {user_id} is not authorized to edit {resource} {resource_id}"
        )


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: Any):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")
