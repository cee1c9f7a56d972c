"""Section catalogs shared by the prompt compiler and the surfaces."""

from __future__ import annotations

LITERATURE_SURVEY = "literature_survey"

CODE_SECTION_TITLES: dict[str, str] = {
    "code_overview": "Code Overview",
    "api_endpoints": "API Endpoints",
    "function_reference": "Function Reference",
    "component_library": "Component Library",
    "data_models": "Data Models",
    "config_options": "Configuration Options",
    "setup_guide": "Setup Guide",
    "troubleshooting": "Troubleshooting",
    "code_examples": "Code Examples",
    "data_flow": "Data Flow Description",
    "code_complexity": "Code Complexity Estimates",
}

CODE_SECTION_DESCRIPTIONS: dict[str, str] = {
    "code_overview": "High-level summary of the codebase structure and organization",
    "api_endpoints": "Document API routes, methods, parameters, and responses",
    "function_reference": "Detailed documentation of key functions and methods",
    "component_library": "Catalog of UI components with props and usage examples",
    "data_models": "Document database schema, types, and data flow",
    "config_options": "Document environment variables and configuration settings",
    "setup_guide": "Instructions for setting up development environment",
    "troubleshooting": "Common issues and their solutions",
    "code_examples": "Practical examples for common use cases",
    "data_flow": "How data moves between the main components",
    "code_complexity": "Rough complexity estimates for the key algorithms",
}

REPORT_SECTION_TITLES: dict[str, str] = {
    "abstract": "Abstract",
    "introduction": "Introduction",
    LITERATURE_SURVEY: "Literature Survey",
    "methodology": "Methodology",
    "proposed_system": "Proposed System",
    "expected_results": "Expected Results",
    "conclusion": "Conclusion",
    "future_scope": "Future Scope",
    "references": "References",
}

REPORT_SECTION_DESCRIPTIONS: dict[str, str] = {
    "abstract": "Brief summary of the entire project",
    "introduction": "Overview of the problem and solution",
    LITERATURE_SURVEY: "Review of related work and technologies",
    "methodology": "Approach and methods used",
    "proposed_system": "Detailed description of the system architecture",
    "expected_results": "Expected outcomes and performance",
    "conclusion": "Summary of findings and implementation",
    "future_scope": "Potential future improvements and extensions",
    "references": "Citations and references used",
}


__all__ = [
    "CODE_SECTION_DESCRIPTIONS",
    "CODE_SECTION_TITLES",
    "LITERATURE_SURVEY",
    "REPORT_SECTION_DESCRIPTIONS",
    "REPORT_SECTION_TITLES",
]
