"""Compiles form selections into the natural-language generation prompt."""

from __future__ import annotations

from typing import Iterable, List, Mapping, Sequence

from ..models import SOURCE_ARCHIVE, LITERATURE_MANUAL, FormState
from .constants import CODE_SECTION_TITLES, LITERATURE_SURVEY, REPORT_SECTION_TITLES


class PromptCompiler:
    """Renders a deterministic prompt from the compiler-relevant FormState fields.

    The compiler is total: missing selections degrade to explicit
    "not provided" or "none selected" wording rather than empty blocks.
    """

    PREAMBLE = (
        "You are a highly skilled software documentation expert. "
        "Generate comprehensive documentation for the following project:"
    )
    NO_DESCRIPTION = "No project description provided."
    REPOSITORY_SOURCE = "Source code from the repository"
    ARCHIVE_SOURCE = "Source code from the uploaded ZIP file"
    NO_CODE_SECTIONS = "No code documentation sections selected"
    NO_REPORT_SECTIONS = "No academic report sections selected"
    LITERATURE_AUTO = (
        "Automatically search arXiv for relevant papers based on the repository topic."
    )
    LITERATURE_MANUAL = "Use the manually provided references for the literature survey."
    VISUALIZATION = (
        "Include visual elements such as code structure diagrams, class hierarchy, or data flow "
        "visualizations where appropriate. Format any visual output in Mermaid.js format."
    )
    CLOSING = (
        "Format the documentation in a clear, professional style with appropriate headings, "
        "examples, and references. Include code snippets where relevant to illustrate key concepts."
    )

    def __init__(
        self,
        code_titles: Mapping[str, str] | None = None,
        report_titles: Mapping[str, str] | None = None,
    ) -> None:
        self._code_titles = dict(CODE_SECTION_TITLES if code_titles is None else code_titles)
        self._report_titles = dict(REPORT_SECTION_TITLES if report_titles is None else report_titles)

    def compile(self, state: FormState) -> str:
        description = state.description.strip() or self.NO_DESCRIPTION
        source = self.ARCHIVE_SOURCE if state.source_type == SOURCE_ARCHIVE else self.REPOSITORY_SOURCE

        blocks: List[str] = [
            self.PREAMBLE,
            f"Project Description:\n{description}",
            source,
            "Generate the following code documentation sections:\n"
            + self._bullets(self._labels(state.code_section_ids, self._code_titles), self.NO_CODE_SECTIONS),
            "Generate the following academic report sections:\n"
            + self._bullets(
                self._labels(state.report_section_ids, self._report_titles), self.NO_REPORT_SECTIONS
            ),
        ]
        literature = self._literature_block(state)
        if literature:
            blocks.append(literature)
        blocks.append(self.VISUALIZATION)
        blocks.append(self.CLOSING)
        return "\n\n".join(blocks).strip()

    def _literature_block(self, state: FormState) -> str:
        if LITERATURE_SURVEY not in state.report_section_ids:
            return ""
        if state.literature_mode != LITERATURE_MANUAL:
            return f"For literature review: {self.LITERATURE_AUTO}"
        text = f"For literature review: {self.LITERATURE_MANUAL}"
        references = [line.strip() for line in state.manual_references.splitlines() if line.strip()]
        if references:
            text += "\nProvided references:\n" + "\n".join(f"- {line}" for line in references)
        return text

    @staticmethod
    def _labels(section_ids: Iterable[str], titles: Mapping[str, str]) -> List[str]:
        # Unknown ids pass through so newer section types still reach the prompt.
        return [titles.get(section_id, section_id) for section_id in section_ids]

    @staticmethod
    def _bullets(labels: Sequence[str], empty: str) -> str:
        if not labels:
            return empty
        return "\n".join(f"- {label}" for label in labels)


_DEFAULT_COMPILER = PromptCompiler()


def compile_prompt(state: FormState) -> str:
    """Return the generation prompt for ``state`` using the built-in section titles."""
    return _DEFAULT_COMPILER.compile(state)


__all__ = ["PromptCompiler", "compile_prompt"]
