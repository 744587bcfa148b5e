"""CLI entrypoints for dockergen commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .ci.provisioner import CIProvisioner, ProvisioningError
from .config import ConfigError, DockerGenConfig, load_config
from .git.fetcher import FetchError
from .llm.client import CompletionError
from .logging import configure_logging
from .models import ProjectInfoError
from .orchestrator import Orchestrator
from .synthesizer import SynthesisError

_PIPELINE_ERRORS = (FetchError, CompletionError, ProjectInfoError, SynthesisError)


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


def _add_workdir_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--workdir",
        type=Path,
        default=None,
        help="Directory that receives the clone (defaults to the current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dockergen",
        description="Generate Dockerfiles for Git repositories using an LLM.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Clone a repository and write a generated Dockerfile into it.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    generate_parser.add_argument("repo_url", help="URL of the repository to containerise.")
    stage_group = generate_parser.add_mutually_exclusive_group()
    stage_group.add_argument(
        "--multi-stage",
        dest="multi_stage",
        action="store_const",
        const=True,
        default=None,
        help='Request a two-stage ("builder" and "final") Dockerfile.',
    )
    stage_group.add_argument(
        "--single-stage",
        dest="multi_stage",
        action="store_const",
        const=False,
        help="Request a single-stage Dockerfile even if multi-stage is the configured default.",
    )
    generate_parser.add_argument(
        "--template",
        type=Path,
        default=None,
        help="Dockerfile template to adapt (defaults to TEMPLATE_PATH).",
    )
    _add_workdir_option(generate_parser)
    generate_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the generated Dockerfile without writing it.",
    )

    provision_parser = subparsers.add_parser(
        "provision",
        help="Fork a GitHub repository, add a Dockerfile and CI workflow, and push.",
    )
    _add_verbose_option(provision_parser, suppress_default=True)
    provision_parser.add_argument("repo_url", help="GitHub URL of the repository to fork.")
    _add_workdir_option(provision_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for dockergen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config()
        if args.command == "provision":
            config.require_provisioning()
    except ConfigError as exc:
        parser.exit(1, f"dockergen: configuration error: {exc}\n")

    configure_logging(verbose=bool(args.verbose), secrets=config.secret_values())

    if args.command == "generate":
        _run_generate(parser, args, config)
    elif args.command == "provision":
        _run_provision(parser, args, config)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _run_generate(
    parser: argparse.ArgumentParser, args: argparse.Namespace, config: DockerGenConfig
) -> None:
    orchestrator = Orchestrator(config)
    options = orchestrator.options(
        use_multi_stage=args.multi_stage,
        template_path=args.template,
    )
    try:
        outcome = orchestrator.run_generate(
            args.repo_url,
            options=options,
            workdir=args.workdir,
            dry_run=bool(args.dry_run),
        )
    except _PIPELINE_ERRORS as exc:
        parser.exit(1, f"dockergen generate failed: {exc}\nRun with --verbose for more details.\n")
    except (OSError, ValueError) as exc:
        parser.exit(1, f"dockergen generate failed: {exc}\n")

    if outcome.dry_run:
        print(outcome.content)
    else:
        print(f"Dockerfile written to {_relativize(outcome.dockerfile_path)}")


def _run_provision(
    parser: argparse.ArgumentParser, args: argparse.Namespace, config: DockerGenConfig
) -> None:
    provisioner = CIProvisioner(config)
    try:
        result = provisioner.run(args.repo_url, workdir=args.workdir)
    except ProvisioningError as exc:
        parser.exit(1, f"dockergen provision failed: {exc}\nRun with --verbose for more details.\n")
    except ValueError as exc:
        parser.exit(1, f"dockergen provision failed: {exc}\n")

    print(f"Forked and updated repository: {result.fork_url}")
    print("The workflow will build and push the Docker image on the next push to the default branch.")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
