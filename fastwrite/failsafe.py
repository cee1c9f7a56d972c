"""Fail-safe documents returned when generation cannot produce real content."""

from __future__ import annotations

from .models import SOURCE_ARCHIVE, DocumentationResult, FormState

OFFLINE_MARKER = "# Documentation Generated Offline"
ERROR_MARKER = "# Documentation Generation Failed"
NO_TEXT_CONTENT = "No text content was generated."

_TROUBLESHOOTING = (
    "- Check your internet connection",
    "- Verify your API key is correct",
    "- Try a different AI provider",
    "- The API service might be temporarily unavailable",
)


def describe_source(state: FormState) -> str:
    """Return a human-readable reference to the project the user submitted."""
    if state.source_type == SOURCE_ARCHIVE:
        if state.archive is not None and state.archive.name:
            return f"the uploaded code ({state.archive.name})"
        return "the uploaded code"
    return f"the repository at {state.repository_url}"


def build_offline_document(source_label: str) -> DocumentationResult:
    """Return the labelled placeholder used when the endpoint sends no content."""
    lines = [
        OFFLINE_MARKER,
        "",
        "## Project Overview",
        "",
        f"This is an offline documentation of {source_label}.",
        "",
        "## Features",
        "",
        "- Feature 1",
        "- Feature 2",
        "- Feature 3",
        "",
        "## Implementation Details",
        "",
        "This documentation was generated offline due to API connectivity issues. "
        "Please try again later for a complete documentation.",
    ]
    return DocumentationResult(text_content="\n".join(lines), visual_content="")


def build_error_report(message: str | None) -> DocumentationResult:
    """Return a navigable document describing why generation failed."""
    reason = _format_reason(message) or "Unknown error"
    lines = [
        ERROR_MARKER,
        "",
        "## Error Information",
        "",
        f"Failed to generate documentation: {reason}",
        "",
        "## Troubleshooting",
        "",
        *_TROUBLESHOOTING,
        "",
        "## Next Steps",
        "",
        "You can try again later or contact support if the issue persists.",
    ]
    return DocumentationResult(text_content="\n".join(lines), visual_content="")


def _format_reason(reason: str | None) -> str | None:
    if not reason:
        return None
    cleaned = " ".join(reason.strip().split())
    if not cleaned:
        return None
    return cleaned[:500] + ("…" if len(cleaned) > 500 else "")


__all__ = [
    "ERROR_MARKER",
    "NO_TEXT_CONTENT",
    "OFFLINE_MARKER",
    "build_error_report",
    "build_offline_document",
    "describe_source",
]
