"""Core data models shared across fastwrite components."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Literal, Optional, Tuple

SourceType = Literal["repository", "archive"]
LiteratureMode = Literal["auto", "manual"]

SOURCE_REPOSITORY: SourceType = "repository"
SOURCE_ARCHIVE: SourceType = "archive"
SOURCE_TYPES: Tuple[str, ...] = (SOURCE_REPOSITORY, SOURCE_ARCHIVE)

LITERATURE_AUTO: LiteratureMode = "auto"
LITERATURE_MANUAL: LiteratureMode = "manual"
LITERATURE_MODES: Tuple[str, ...] = (LITERATURE_AUTO, LITERATURE_MANUAL)

# Placeholder sent for whichever source reference does not apply.
NOT_APPLICABLE = "NULL"


@dataclass(frozen=True)
class ArchiveHandle:
    """A user-selected ZIP archive. Never serialized into the session snapshot."""

    name: str
    content_type: str = ""
    path: Optional[Path] = None


@dataclass(frozen=True)
class FormState:
    """Every selection the user makes before submitting."""

    source_type: SourceType = SOURCE_REPOSITORY
    repository_url: str = ""
    archive: Optional[ArchiveHandle] = None
    description: str = ""
    provider_id: str = "google"
    model_id: str = ""
    code_section_ids: Tuple[str, ...] = ()
    report_section_ids: Tuple[str, ...] = ("abstract", "introduction", "methodology")
    literature_mode: LiteratureMode = LITERATURE_AUTO
    manual_references: str = ""

    @property
    def has_sections(self) -> bool:
        return bool(self.code_section_ids or self.report_section_ids)


@dataclass(frozen=True)
class SubmissionPayload:
    """Body of one outbound generation request."""

    repository_reference: str
    secondary_reference: str
    provider_id: str
    model_id: str
    secret: str = field(repr=False)
    prompt: str

    def to_json(self) -> Dict[str, str]:
        return {
            "repository_reference": self.repository_reference,
            "secondary_reference": self.secondary_reference,
            "provider_id": self.provider_id,
            "model_id": self.model_id,
            "secret": self.secret,
            "prompt": self.prompt,
        }


@dataclass(frozen=True)
class DocumentationResult:
    """The single persisted output of a submission attempt."""

    text_content: str
    visual_content: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"textContent": self.text_content, "visualContent": self.visual_content}

    @classmethod
    def from_dict(cls, payload: Any) -> Optional["DocumentationResult"]:
        if not isinstance(payload, dict):
            return None
        text = payload.get("textContent")
        visual = payload.get("visualContent", "")
        if not isinstance(text, str):
            return None
        if not isinstance(visual, str):
            visual = ""
        return cls(text_content=text, visual_content=visual)


__all__ = [
    "ArchiveHandle",
    "DocumentationResult",
    "FormState",
    "LITERATURE_AUTO",
    "LITERATURE_MANUAL",
    "LITERATURE_MODES",
    "LiteratureMode",
    "NOT_APPLICABLE",
    "SOURCE_ARCHIVE",
    "SOURCE_REPOSITORY",
    "SOURCE_TYPES",
    "SourceType",
    "SubmissionPayload",
]
