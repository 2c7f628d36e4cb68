"""Command-line interface router for snapid."""

from __future__ import annotations

import argparse
import json
import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any, Final

from snapid.config import dump_effective_config, load_config
from snapid.constants import SNAP_NAME_BUFFER_SIZE
from snapid.domain.errors import SnapError
from snapid.domain.instance import parse_instance_name, split_instance_name
from snapid.domain.names import check_snap_name
from snapid.domain.security_tag import verify_security_tag
from snapid.manifest import check_manifest_file
from snapid.observability.logging import log_context, setup_logging, shutdown_logging
from snapid.ui.render import CLIRenderer, create_renderer

EXIT_OK: Final[int] = 0
EXIT_INVALID: Final[int] = 1

_LOGGER = logging.getLogger(__name__)

_Handler = Callable[[argparse.Namespace, Mapping[str, Any]], int]


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse command router for all supported CLI workflows."""

    parser = argparse.ArgumentParser(
        prog="snapid",
        description=(
            "snapid — validate snap identifiers before they reach paths or security profiles.\n\n"
            "Common workflows:\n"
            "  snapid name hello-world            Validate snap names\n"
            "  snapid tag snap.foo.bar --snap foo Verify a security tag\n"
            "  snapid instance foo_bar            Print the snap name of an instance\n"
            "  snapid manifest meta/snap.yaml     Check a snap.yaml manifest\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help="Path to snapid TOML config (default: ./snapid.toml if present).",
    )
    common.add_argument(
        "--json",
        action="store_true",
        default=None,
        help="Emit deterministic JSON output.",
    )
    common.add_argument(
        "--no-color",
        action="store_true",
        default=None,
        help="Disable colored output (also respects NO_COLOR env var).",
    )
    common.add_argument(
        "--log-level",
        default=None,
        help="Override observability.log_level (DEBUG, INFO, WARNING, ERROR).",
    )
    common.add_argument(
        "--log-format",
        default=None,
        choices=("json", "text"),
        help="Override observability.log_format.",
    )
    common.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        default=False,
        help="Show detailed output.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    name_parser = subparsers.add_parser(
        "name",
        parents=[common],
        help="Validate one or more snap names",
    )
    name_parser.add_argument("names", nargs="+", help="Snap names to validate")

    tag_parser = subparsers.add_parser(
        "tag",
        parents=[common],
        help="Verify a security tag against the snap it must belong to",
    )
    tag_parser.add_argument("security_tag", help="Tag such as snap.<name>.<app>")
    tag_parser.add_argument("--snap", required=True, help="Expected snap name")

    instance_parser = subparsers.add_parser(
        "instance",
        parents=[common],
        help="Print the snap name part of an instance name",
    )
    instance_parser.add_argument("instance_name", help="Instance name such as foo_bar")
    instance_parser.add_argument(
        "--capacity",
        type=int,
        default=SNAP_NAME_BUFFER_SIZE,
        help=f"Destination capacity in bytes, terminator included (default: {SNAP_NAME_BUFFER_SIZE}).",
    )
    instance_parser.add_argument(
        "--validate",
        action="store_true",
        help="Validate the instance name before splitting it and also print the key.",
    )

    manifest_parser = subparsers.add_parser(
        "manifest",
        parents=[common],
        help="Check a snap.yaml manifest",
    )
    manifest_parser.add_argument("manifest_path", help="Path to snap.yaml")

    subparsers.add_parser(
        "config",
        parents=[common],
        help="Show the effective configuration",
    )

    return parser


def run_cli(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config(
        args.config_path,
        cli_overrides={
            "observability.log_level": args.log_level,
            "observability.log_format": args.log_format,
            "output.json": args.json,
            "output.no_color": args.no_color,
        },
    )
    setup_logging(config["observability"])
    try:
        with log_context(command=args.command):
            _LOGGER.debug("dispatching command")
            return _COMMANDS[args.command](args, config)
    finally:
        shutdown_logging()


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _cmd_name(args: argparse.Namespace, config: Mapping[str, Any]) -> int:
    results: list[dict[str, object]] = []
    for name in args.names:
        error = check_snap_name(name)
        results.append(
            {
                "name": name,
                "valid": error is None,
                "error": None if error is None else error.as_dict(),
            }
        )
    all_valid = all(item["valid"] for item in results)

    if _json_enabled(config):
        _emit_json({"results": results, "valid": all_valid})
    else:
        renderer = _get_renderer(args, config)
        for item in results:
            error_payload = item["error"]
            if isinstance(error_payload, dict):
                renderer.fail(str(item["name"]), str(error_payload["message"]))
            else:
                renderer.ok(str(item["name"]))
    return EXIT_OK if all_valid else EXIT_INVALID


def _cmd_tag(args: argparse.Namespace, config: Mapping[str, Any]) -> int:
    valid = verify_security_tag(args.security_tag, args.snap)
    # The verifier reports a boolean only; the snap name check supplies a reason.
    name_error = None if valid else check_snap_name(args.snap)

    if _json_enabled(config):
        _emit_json(
            {
                "security_tag": args.security_tag,
                "snap_name": args.snap,
                "valid": valid,
                "snap_name_error": None if name_error is None else name_error.as_dict(),
            }
        )
    else:
        renderer = _get_renderer(args, config)
        if valid:
            renderer.ok(args.security_tag, f"belongs to {args.snap}")
        else:
            renderer.fail(args.security_tag, f"is not a valid security tag of {args.snap!r}")
            if name_error is not None and renderer.verbose:
                renderer.items([name_error.message])
    return EXIT_OK if valid else EXIT_INVALID


def _cmd_instance(args: argparse.Namespace, config: Mapping[str, Any]) -> int:
    instance_key: str | None = None
    if args.validate:
        try:
            parsed = parse_instance_name(args.instance_name)
        except SnapError as exc:
            return _report_snap_error(args, config, args.instance_name, exc)
        instance_key = parsed.instance_key

    snap_name = split_instance_name(args.instance_name, args.capacity)

    if _json_enabled(config):
        payload: dict[str, object] = {"instance_name": args.instance_name, "snap_name": snap_name}
        if args.validate:
            payload["instance_key"] = instance_key
        _emit_json(payload)
    else:
        renderer = _get_renderer(args, config)
        renderer.text(snap_name)
        if args.validate and instance_key:
            renderer.kv("instance key", instance_key)
    return EXIT_OK


def _cmd_manifest(args: argparse.Namespace, config: Mapping[str, Any]) -> int:
    report = check_manifest_file(args.manifest_path)

    if _json_enabled(config):
        _emit_json(report.as_dict())
    else:
        renderer = _get_renderer(args, config)
        renderer.kv("snap", report.snap_name if report.snap_name is not None else "<invalid>")
        for tag in report.security_tags:
            renderer.ok(tag)
        for issue in report.issues:
            renderer.fail(issue.subject, issue.message)
    return EXIT_OK if report.is_valid else EXIT_INVALID


def _cmd_config(args: argparse.Namespace, config: Mapping[str, Any]) -> int:
    if _json_enabled(config):
        print(dump_effective_config(config))
        return EXIT_OK

    renderer = _get_renderer(args, config)
    for section in sorted(config):
        values = config[section]
        if not isinstance(values, Mapping):
            continue
        for key in sorted(values):
            renderer.kv(f"{section}.{key}", values[key])
    return EXIT_OK


_COMMANDS: Final[dict[str, _Handler]] = {
    "config": _cmd_config,
    "instance": _cmd_instance,
    "manifest": _cmd_manifest,
    "name": _cmd_name,
    "tag": _cmd_tag,
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _report_snap_error(
    args: argparse.Namespace,
    config: Mapping[str, Any],
    subject: str,
    error: SnapError,
) -> int:
    if _json_enabled(config):
        _emit_json({"subject": subject, "valid": False, "error": error.as_dict()})
    else:
        _get_renderer(args, config).fail(subject, error.message)
    return EXIT_INVALID


def _json_enabled(config: Mapping[str, Any]) -> bool:
    return bool(config["output"]["json"])


def _emit_json(payload: Mapping[str, object]) -> None:
    print(json.dumps(payload, sort_keys=True, ensure_ascii=True))


def _get_renderer(args: argparse.Namespace, config: Mapping[str, Any]) -> CLIRenderer:
    return create_renderer(
        no_color=bool(config["output"]["no_color"]),
        verbose=bool(args.verbose),
    )


__all__ = ["build_parser", "run_cli"]
