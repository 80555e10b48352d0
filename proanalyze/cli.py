"""CLI entrypoints for proanalyze commands."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List

from .config import ConfigError, load_config
from .errors import AuthenticationError, ProAnalyzeError
from .logging import configure_logging, get_logger
from .models import AnalysisReport, SourceFile
from .orchestrator import Orchestrator
from .sources import is_repo_url, load_directory, load_manifest, parse_repo_url
from .stores import LastUsedStore

logger = get_logger("cli")


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Increase log verbosity for troubleshooting.",
    )


def _add_source_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "source",
        nargs="?",
        default=None,
        help="Project directory, or the GitHub URL a --manifest was built from (defaults to the last one used).",
    )
    parser.add_argument(
        "--manifest",
        type=Path,
        default=None,
        help="JSON file holding an already-fetched list of {name, path, content, size} records.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to .proanalyze.yml (defaults to the source directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="proanalyze",
        description="Analyse a Python project with a hosted LLM and draw its workflows.",
    )
    _add_verbose_option(parser)
    parser.add_argument("--log-file", type=Path, default=None, help="Also write logs to this file.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Produce the technical analysis and workflow diagrams.",
    )
    _add_verbose_option(analyze_parser, suppress_default=True)
    _add_source_options(analyze_parser)
    analyze_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the analysis markdown here instead of printing it.",
    )
    analyze_parser.add_argument(
        "--diagrams-dir",
        type=Path,
        default=Path("."),
        help="Directory receiving system_workflow.svg and user_workflow.svg.",
    )
    analyze_parser.add_argument(
        "--no-diagrams",
        action="store_true",
        help="Skip the workflow step extraction and diagram rendering.",
    )

    chat_parser = subparsers.add_parser(
        "chat",
        help="Ask one question about the project.",
    )
    _add_verbose_option(chat_parser, suppress_default=True)
    chat_parser.add_argument("question", help="The question to answer.")
    chat_parser.add_argument(
        "--source",
        dest="source",
        default=None,
        help="Project directory or GitHub URL (defaults to the last one used).",
    )
    chat_parser.add_argument("--manifest", type=Path, default=None, help="JSON file list to use instead.")
    chat_parser.add_argument("--config", type=Path, default=None, help="Path to .proanalyze.yml.")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP service.")
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for proanalyze commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    if args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
        return

    store = LastUsedStore()
    try:
        files, identifier = _load_sources(args, store)
        config = load_config(args.config or _default_config_location(identifier))
    except (FileNotFoundError, ValueError, ConfigError) as exc:
        parser.exit(1, f"{exc}\n")
    orchestrator = Orchestrator(config)

    try:
        if args.command == "analyze":
            report = asyncio.run(orchestrator.run(files, diagrams=not args.no_diagrams))
            store.remember(identifier)
            _emit_report(orchestrator, report, args.output, args.diagrams_dir)
        elif args.command == "chat":
            answer = asyncio.run(orchestrator.ask(args.question, files, project_name=_project_name(identifier)))
            store.remember(identifier)
            print(answer)
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except AuthenticationError as exc:
        parser.exit(1, f"{exc}\n")
    except ProAnalyzeError as exc:
        parser.exit(1, f"proanalyze {args.command} failed: {exc}\nRun with --verbose for more details.\n")
    except ValueError as exc:
        parser.exit(1, f"{exc}\n")


def _load_sources(args: argparse.Namespace, store: LastUsedStore) -> tuple[List[SourceFile], str]:
    """Return the files to analyse and the identifier remembered for next time.

    A repository URL is only accepted together with ``--manifest``: fetching the
    remote tree is left to whoever produced the manifest.
    """
    if args.manifest is not None:
        files = load_manifest(args.manifest)
        if args.source and is_repo_url(args.source):
            parse_repo_url(args.source)
            return files, args.source
        return files, str(args.manifest)
    source = args.source or store.get()
    if not source:
        raise ValueError("No source given and no previously used source is stored.")
    if is_repo_url(source):
        owner, repo = parse_repo_url(source)
        raise ValueError(
            f"{owner}/{repo} is a remote repository; fetch its files and pass them with --manifest."
        )
    return load_directory(Path(source)), source


def _project_name(identifier: str) -> str:
    if is_repo_url(identifier):
        return parse_repo_url(identifier)[1]
    return Path(identifier).name


def _default_config_location(identifier: str) -> Path:
    path = Path(identifier)
    return path if path.is_dir() else Path.cwd()


def _emit_report(
    orchestrator: Orchestrator,
    report: AnalysisReport,
    output: Path | None,
    diagrams_dir: Path,
) -> None:
    markdown = orchestrator.render_markdown(report.result)
    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(markdown, encoding="utf-8")
        print(f"Analysis written to {_relativize(output)}")
    else:
        print(markdown)

    if report.diagrams is not None:
        diagrams_dir.mkdir(parents=True, exist_ok=True)
        system_path = diagrams_dir / "system_workflow.svg"
        user_path = diagrams_dir / "user_workflow.svg"
        system_path.write_text(report.diagrams.system_svg, encoding="utf-8")
        user_path.write_text(report.diagrams.user_svg, encoding="utf-8")
        print(f"Diagrams written to {_relativize(system_path)} and {_relativize(user_path)}")
    elif report.diagram_error:
        print(f"Diagram generation failed: {report.diagram_error}", file=sys.stderr)


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
