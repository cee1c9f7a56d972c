"""Tests for the prompt compiler."""

from __future__ import annotations

from dataclasses import replace

from fastwrite.models import ArchiveHandle, FormState
from fastwrite.prompting import PromptCompiler, compile_prompt


def test_compile_is_deterministic() -> None:
    state = FormState(
        description="A tool",
        code_section_ids=("code_overview", "api_endpoints"),
        report_section_ids=("abstract", "literature_survey"),
        literature_mode="manual",
        manual_references="Paper A\nPaper B",
    )

    assert compile_prompt(state) == compile_prompt(state)
    assert compile_prompt(state) == compile_prompt(replace(state))


def test_compile_orders_blocks_and_resolves_labels() -> None:
    state = FormState(
        description="Inventory service",
        code_section_ids=("code_overview", "data_flow"),
        report_section_ids=("abstract",),
    )

    prompt = compile_prompt(state)

    assert prompt.startswith("You are a highly skilled software documentation expert.")
    assert "Project Description:\nInventory service" in prompt
    assert "- Code Overview\n- Data Flow Description" in prompt
    assert "Generate the following academic report sections:\n- Abstract" in prompt
    assert prompt.index("Project Description") < prompt.index("Source code from the repository")
    assert prompt.index("code documentation sections") < prompt.index("academic report sections")
    assert "Mermaid.js" in prompt
    assert prompt.endswith("Include code snippets where relevant to illustrate key concepts.")
    assert prompt == prompt.strip()


def test_compile_uses_placeholders_for_empty_fields() -> None:
    state = FormState(description="   ", code_section_ids=(), report_section_ids=("abstract",))

    prompt = compile_prompt(state)

    assert "No project description provided." in prompt
    assert "No code documentation sections selected" in prompt
    assert "- Abstract" in prompt
    assert "No academic report sections selected" not in prompt


def test_compile_lists_code_sections_when_report_side_is_empty() -> None:
    state = FormState(code_section_ids=("setup_guide",), report_section_ids=())

    prompt = compile_prompt(state)

    assert "- Setup Guide" in prompt
    assert "No academic report sections selected" in prompt


def test_unknown_section_ids_pass_through() -> None:
    state = FormState(code_section_ids=("security_review",), report_section_ids=("appendix",))

    prompt = compile_prompt(state)

    assert "- security_review" in prompt
    assert "- appendix" in prompt


def test_archive_source_sentence() -> None:
    state = FormState(source_type="archive", archive=ArchiveHandle(name="project.zip"))

    prompt = compile_prompt(state)

    assert "Source code from the uploaded ZIP file" in prompt
    assert "Source code from the repository" not in prompt


def test_literature_sentence_omitted_without_survey() -> None:
    for mode in ("auto", "manual"):
        state = FormState(report_section_ids=("abstract",), literature_mode=mode, manual_references="X")
        prompt = compile_prompt(state)
        assert "For literature review" not in prompt
        assert "arXiv" not in prompt


def test_literature_auto_mode_searches_arxiv() -> None:
    state = FormState(report_section_ids=("literature_survey",), literature_mode="auto")

    prompt = compile_prompt(state)

    assert "Automatically search arXiv" in prompt
    assert "manually provided references" not in prompt


def test_literature_manual_mode_uses_supplied_references() -> None:
    state = FormState(
        report_section_ids=("literature_survey",),
        literature_mode="manual",
        manual_references="Smith et al. 2020\n\n  Doe 2021  ",
    )

    prompt = compile_prompt(state)

    assert "Use the manually provided references for the literature survey." in prompt
    assert "arXiv" not in prompt
    assert "Provided references:\n- Smith et al. 2020\n- Doe 2021" in prompt


def test_custom_title_tables() -> None:
    compiler = PromptCompiler(code_titles={"code_overview": "Overview"}, report_titles={})
    state = FormState(code_section_ids=("code_overview",), report_section_ids=("abstract",))

    prompt = compiler.compile(state)

    assert "- Overview" in prompt
    assert "- abstract" in prompt
