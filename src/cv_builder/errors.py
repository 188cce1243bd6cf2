"""Error taxonomy for the CV document core."""

from __future__ import annotations


class CVBuilderError(Exception):
    """Base class for every error raised by cv_builder."""


class ValidationError(CVBuilderError):
    """A payload was rejected; nothing was applied.

    ``errors`` maps a dotted field path (``"end"``, ``"bullets.0"``,
    ``"items"``) to the messages collected for it.
    """

    def __init__(self, errors: dict[str, list[str]] | str, *, field: str = "__root__"):
        if isinstance(errors, str):
            errors = {field: [errors]}
        self.errors: dict[str, list[str]] = {k: list(v) for k, v in errors.items()}
        super().__init__(self._summary())

    def _summary(self) -> str:
        parts = []
        for field, messages in self.errors.items():
            for message in messages:
                parts.append(message if field == "__root__" else f"{field}: {message}")
        return "; ".join(parts) or "Invalid payload"

    def messages_for(self, field: str) -> list[str]:
        """Messages for *field* and any of its nested paths."""
        found: list[str] = []
        for key, messages in self.errors.items():
            if key == field or key.startswith(f"{field}."):
                found.extend(messages)
        return found

    @property
    def fields(self) -> list[str]:
        return list(self.errors)


class PersistenceError(CVBuilderError):
    """Saving or loading a document failed. The in-memory document is kept."""


class DocumentNotFoundError(PersistenceError):
    """No stored document matched the request."""


class RenderError(CVBuilderError):
    """Rendering or exporting a document failed. The document is unaffected."""


class TemplateNotFoundError(CVBuilderError):
    """No template is registered under the requested id."""

    def __init__(self, template_id: str, available: list[str]):
        self.template_id = template_id
        self.available = available
        super().__init__(
            f"Unknown template {template_id!r}. Available: {', '.join(available)}"
        )


class ConcurrencyViolation(CVBuilderError):
    """A save was requested while another one was in flight.

    Only used internally to describe the coalesced request; callers of
    ``DocumentStore.save_document`` never see it.
    """
