"""fastwrite: assemble and submit AI documentation requests for a code base."""

from .models import ArchiveHandle, DocumentationResult, FormState, SubmissionPayload
from .orchestrator import SubmissionOrchestrator, SubmissionOutcome, SubmissionState
from .prompting import compile_prompt

__all__ = [
    "ArchiveHandle",
    "DocumentationResult",
    "FormState",
    "SubmissionOrchestrator",
    "SubmissionOutcome",
    "SubmissionPayload",
    "SubmissionState",
    "compile_prompt",
]

__version__ = "0.1.0"
