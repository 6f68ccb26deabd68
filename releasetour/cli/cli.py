"""
CLI for the Release Tour Go execution engine.
"""
import argparse
import json
import logging
import sys
from typing import Dict, List, Optional

from releasetour.config.defaults import EXECUTOR_DEFAULTS, SERVER_DEFAULTS
from releasetour.config.logging import setup_logging
from releasetour.exceptions import ReleaseTourError
from releasetour.executor import ExecutionRequest, Executor
from releasetour.observability import init_metrics, shutdown_metrics, update_toolchains_available
from releasetour.toolchain import ToolchainRegistry

logger = logging.getLogger(__name__)


def build_registry(config_path: Optional[str] = None) -> ToolchainRegistry:
    if config_path:
        registry = ToolchainRegistry.from_versions_file(config_path)
    else:
        registry = ToolchainRegistry()
    registry.initialize()
    update_toolchains_available(len(registry.list_available()))
    return registry


def _parse_env_pairs(pairs: List[str]) -> Dict[str, str]:
    env = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {pair!r}")
        env[key] = value
    return env


def run_file(args: argparse.Namespace) -> int:
    with open(args.file, encoding="utf-8") as f:
        code = f.read()

    registry = build_registry(args.config)
    executor = Executor(registry, scratch_dir=args.scratch_dir)
    request = ExecutionRequest(
        code=code,
        version=args.version,
        auto_detect=args.auto_detect,
        timeout=args.timeout,
        environment=_parse_env_pairs(args.env),
        env_vars=args.env_vars or "",
        working_dir=args.path_hint if args.path_hint is not None else args.file,
        strict_version=args.strict,
    )
    result = executor.run(request)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    else:
        sys.stdout.write(result.output)
        if result.error:
            print(f"error: {result.error}", file=sys.stderr)
    return result.exit_code


def list_versions(args: argparse.Namespace) -> int:
    registry = build_registry(args.config)
    for version in registry.list_available():
        entry = registry.get_entry(version)
        print(f"{version}\t{entry.full_version}\t{entry.path}")
    return 0


def show_status(args: argparse.Namespace) -> int:
    registry = build_registry(args.config)
    print(json.dumps(registry.status(), indent=2))
    return 0


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        help="Versions file mapping Go versions to toolchains (default: built-in /opt/go<X.Y> table)",
    )
    parser.add_argument(
        "--log-level",
        default=SERVER_DEFAULTS.log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help=f"Log level (default: {SERVER_DEFAULTS.log_level})",
    )
    parser.add_argument("--log-file", help="Log file path")
    parser.add_argument(
        "--metrics-exporter",
        default=SERVER_DEFAULTS.metrics_exporter,
        choices=["none", "prometheus", "otlp", "otlp_http", "console"],
        help=f"Metrics exporter type (default: {SERVER_DEFAULTS.metrics_exporter})",
    )
    parser.add_argument(
        "--metrics-endpoint",
        help="OTLP endpoint URL (e.g., http://localhost:4317 for gRPC)",
    )


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(
        prog="releasetour",
        description="Run Go code with one of several installed Go versions",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a Go source file")
    run_parser.add_argument("file", help="Go source file")
    run_parser.add_argument("--version", help="Go version to use, e.g. 1.22")
    run_parser.add_argument(
        "--auto-detect",
        action="store_true",
        help="Detect the Go version from markers in the source",
    )
    run_parser.add_argument(
        "--timeout",
        type=float,
        default=EXECUTOR_DEFAULTS.timeout,
        help=f"Timeout in seconds (default: {EXECUTOR_DEFAULTS.timeout:g})",
    )
    run_parser.add_argument(
        "--env",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Environment override for the program (repeatable)",
    )
    run_parser.add_argument(
        "--env-vars",
        help='Raw comma-separated environment, e.g. "GOEXPERIMENT=jsonv2"',
    )
    run_parser.add_argument(
        "--path-hint",
        help="Lesson path used for version detection (default: the file path)",
    )
    run_parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail if --version differs from the resolved version",
    )
    run_parser.add_argument(
        "--scratch-dir",
        help="Directory for scratch source files (default: system temp dir)",
    )
    run_parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    _add_common_arguments(run_parser)

    versions_parser = subparsers.add_parser("versions", help="List available Go versions")
    _add_common_arguments(versions_parser)

    status_parser = subparsers.add_parser("status", help="Show toolchain registry status")
    _add_common_arguments(status_parser)

    args = parser.parse_args(argv)

    setup_logging(args.log_level, getattr(args, "log_file", None))

    if args.metrics_exporter != "none":
        exporter_kwargs = {}
        if args.metrics_endpoint:
            exporter_kwargs["endpoint"] = args.metrics_endpoint
        init_metrics(SERVER_DEFAULTS.service_name, args.metrics_exporter, **exporter_kwargs)

    commands = {
        "run": run_file,
        "versions": list_versions,
        "status": show_status,
    }
    try:
        exit_code = commands[args.command](args)
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))
    except (ReleaseTourError, OSError) as e:
        logger.error(str(e))
        exit_code = 1
    finally:
        shutdown_metrics()
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
