"""CLI entrypoints for fastwrite commands."""

from __future__ import annotations

import argparse
import asyncio
import getpass
import mimetypes
import sys
from pathlib import Path

from .catalog import DEFAULT_CATALOG
from .config import ConfigError, load_config
from .errors import ValidationError
from .form import FormStateManager
from .logging import configure_logging
from .models import LITERATURE_MODES, SOURCE_REPOSITORY, ArchiveHandle
from .orchestrator import SubmissionState
from .prompting.constants import (
    CODE_SECTION_DESCRIPTIONS,
    CODE_SECTION_TITLES,
    REPORT_SECTION_DESCRIPTIONS,
    REPORT_SECTION_TITLES,
)
from .workspace import Workspace, open_workspace


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_form_options(parser: argparse.ArgumentParser) -> None:
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--repo", help="Repository URL to document.")
    source.add_argument("--archive", type=Path, help="ZIP archive with the source code.")
    parser.add_argument("--description", help="Short description of the project.")
    parser.add_argument("--provider", help="AI provider id (see `fastwrite providers`).")
    parser.add_argument("--model", help="Model id offered by the provider.")
    parser.add_argument(
        "--code-section",
        action="append",
        dest="code_sections",
        metavar="ID",
        help="Code documentation section to include (repeatable, replaces the saved list).",
    )
    parser.add_argument(
        "--report-section",
        action="append",
        dest="report_sections",
        metavar="ID",
        help="Academic report section to include (repeatable, replaces the saved list).",
    )
    parser.add_argument(
        "--no-code-sections",
        action="store_true",
        help="Clear the saved code documentation sections.",
    )
    parser.add_argument(
        "--no-report-sections",
        action="store_true",
        help="Clear the saved academic report sections.",
    )
    parser.add_argument(
        "--literature",
        choices=LITERATURE_MODES,
        help="How references for the literature survey are gathered.",
    )
    parser.add_argument(
        "--references-file",
        type=Path,
        help="File with one manually supplied reference per line.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fastwrite",
        description="Generate project documentation and academic reports with AI providers.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to .fastwrite.yml or the directory holding it (defaults to the current directory).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    providers_parser = subparsers.add_parser("providers", help="List AI providers and their models.")
    _add_verbose_option(providers_parser, suppress_default=True)

    sections_parser = subparsers.add_parser("sections", help="List the selectable section ids.")
    _add_verbose_option(sections_parser, suppress_default=True)

    key_parser = subparsers.add_parser("key", help="Manage stored provider API keys.")
    _add_verbose_option(key_parser, suppress_default=True)
    key_subparsers = key_parser.add_subparsers(dest="key_command", required=True)
    key_set = key_subparsers.add_parser("set", help="Store the API key for a provider.")
    key_set.add_argument("provider")
    key_set.add_argument("secret", nargs="?", help="API key (prompted for when omitted).")
    key_remove = key_subparsers.add_parser("remove", help="Forget the API key for a provider.")
    key_remove.add_argument("provider")
    key_subparsers.add_parser("status", help="Show which providers have a stored key.")

    preview_parser = subparsers.add_parser("preview", help="Print the prompt for the current form.")
    _add_verbose_option(preview_parser, suppress_default=True)
    _add_form_options(preview_parser)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Submit the current form and store the generated documentation.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    _add_form_options(generate_parser)

    result_parser = subparsers.add_parser("result", help="Print the most recent documentation result.")
    _add_verbose_option(result_parser, suppress_default=True)
    result_parser.add_argument(
        "--output",
        type=Path,
        help="Write the documentation to this file instead of stdout.",
    )

    session_parser = subparsers.add_parser("session", help="Manage the saved form session.")
    _add_verbose_option(session_parser, suppress_default=True)
    session_subparsers = session_parser.add_subparsers(dest="session_command", required=True)
    session_subparsers.add_parser("show", help="Print the saved form selections.")
    session_subparsers.add_parser("clear", help="Reset the form to its defaults.")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP service.")
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def apply_form_options(form: FormStateManager, args: argparse.Namespace) -> None:
    """Copy form flags into the session-backed form manager."""
    if getattr(args, "repo", None):
        form.update(source_type=SOURCE_REPOSITORY, repository_url=args.repo)
    if getattr(args, "archive", None):
        path: Path = args.archive
        content_type = mimetypes.guess_type(path.name)[0] or ""
        form.select_archive(ArchiveHandle(name=path.name, content_type=content_type, path=path))
    if getattr(args, "description", None) is not None:
        form.set("description", args.description)
    if getattr(args, "provider", None):
        form.select_provider(args.provider)
    if getattr(args, "model", None):
        form.set("model_id", args.model)
    if getattr(args, "no_code_sections", False):
        form.set("code_section_ids", ())
    if getattr(args, "code_sections", None):
        form.set("code_section_ids", args.code_sections)
    if getattr(args, "no_report_sections", False):
        form.set("report_section_ids", ())
    if getattr(args, "report_sections", None):
        form.set("report_section_ids", args.report_sections)
    if getattr(args, "literature", None):
        form.set("literature_mode", args.literature)
    if getattr(args, "references_file", None):
        form.set("manual_references", args.references_file.read_text(encoding="utf-8"))


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for fastwrite commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), service=args.command == "serve")

    try:
        config = load_config(args.config)
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "serve":
        from .service import run_service

        run_service(args.host, args.port, config=config)
        return

    workspace = open_workspace(
        config,
        navigate=lambda _route: print("Documentation stored. View it with `fastwrite result`."),
        notify=_print_notification,
    )

    try:
        _dispatch(parser, args, workspace)
    except ValidationError as exc:
        parser.exit(1, f"{exc.message}\n")
    except OSError as exc:
        parser.exit(1, f"fastwrite {args.command} failed: {exc}\nRun with --verbose for more details.\n")


def _dispatch(parser: argparse.ArgumentParser, args: argparse.Namespace, workspace: Workspace) -> None:
    if args.command == "providers":
        for provider in DEFAULT_CATALOG:
            marker = "key set" if workspace.credentials.has(provider.id) else "no key"
            print(f"{provider.id} ({provider.name}, {marker}) - get a key at {provider.key_url}")
            for model in provider.models:
                print(f"  {model}: {DEFAULT_CATALOG.display_name(model)}")
    elif args.command == "sections":
        print("Code documentation sections:")
        for section_id, title in CODE_SECTION_TITLES.items():
            print(f"  {section_id}: {title} - {CODE_SECTION_DESCRIPTIONS[section_id]}")
        print("Academic report sections:")
        for section_id, title in REPORT_SECTION_TITLES.items():
            print(f"  {section_id}: {title} - {REPORT_SECTION_DESCRIPTIONS[section_id]}")
    elif args.command == "key":
        _run_key_command(args, workspace)
    elif args.command == "preview":
        apply_form_options(workspace.form, args)
        print(workspace.orchestrator.compiler.compile(workspace.form.state))
    elif args.command == "generate":
        apply_form_options(workspace.form, args)
        outcome = asyncio.run(workspace.orchestrator.submit(workspace.form.state))
        if outcome.state is SubmissionState.REJECTED:
            parser.exit(1)
        if outcome.state is SubmissionState.FAILED:
            parser.exit(2)
    elif args.command == "result":
        result = workspace.results.load()
        if result is None:
            parser.exit(1, "No documentation has been generated yet.\n")
        text = result.text_content
        if result.visual_content:
            text = f"{text}\n\n```mermaid\n{result.visual_content}\n```"
        if args.output is not None:
            args.output.write_text(text + "\n", encoding="utf-8")
            print(f"Documentation written to {_relativize(args.output)}")
        else:
            print(text)
    elif args.command == "session":
        if args.session_command == "clear":
            workspace.form.reset()
            print("Form session cleared")
        else:
            state = workspace.form.state
            print(f"source: {state.source_type} {state.repository_url}".rstrip())
            print(f"provider: {state.provider_id or '-'} model: {state.model_id or '-'}")
            print(f"code sections: {', '.join(state.code_section_ids) or '-'}")
            print(f"report sections: {', '.join(state.report_section_ids) or '-'}")
            print(f"literature: {state.literature_mode}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _run_key_command(args: argparse.Namespace, workspace: Workspace) -> None:
    credentials = workspace.credentials
    if args.key_command == "set":
        secret = args.secret
        if secret is None:
            secret = getpass.getpass(f"Enter your {args.provider} API key: ")
        credentials.set(args.provider, secret)
        print(f"API key saved for {args.provider}")
    elif args.key_command == "remove":
        credentials.remove(args.provider)
        print(f"API key removed for {args.provider}")
    else:
        for provider in DEFAULT_CATALOG:
            status = "set" if credentials.has(provider.id) else "missing"
            print(f"{provider.id}: {status}")


def _print_notification(level: str, message: str) -> None:
    stream = sys.stderr if level == "error" else sys.stdout
    print(message, file=stream)


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
