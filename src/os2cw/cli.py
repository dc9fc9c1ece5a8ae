"""CLI interface for os2cw."""

from __future__ import annotations

import argparse
import logging
import sys

from . import __version__
from .collector.registry import MetricRegistry, build_registry
from .config import load_config, resolve_config
from .dispatcher import Dispatcher
from .errors import ConfigurationError
from .metadata import InstanceMetadata

logger = logging.getLogger(__name__)

SEND_EXAMPLE = "os2cw send -u gb -m mb -v / -v /home mem-avail mem-used vol-free uptime"


def metrics_help(registry: MetricRegistry) -> str:
    """Render the ``id | CloudWatch name`` table shown under ``send --help``."""
    ids = registry.all_ids()
    width = max((len(i) for i in ids), default=0)
    rows = [f"      {i:<{width}} | {registry.lookup(i).name}" for i in ids]
    return "\n".join(["example:", f"  {SEND_EXAMPLE}", "", "Available Metrics:", *rows])


def _cmd_send(args: argparse.Namespace) -> int:
    """Collect the requested metrics and send them to CloudWatch."""
    metadata = InstanceMetadata()
    dispatcher = Dispatcher(args.registry, metadata=metadata)
    try:
        settings = load_config(args.config)
        config = resolve_config(
            settings,
            memory_unit=args.mem_unit,
            volume_unit=args.vol_unit,
            namespace=args.namespace,
            system_id=args.id,
            volumes=args.volumes,
            dry_run=args.dryrun,
            args=args.metrics,
            metadata=metadata,
        )
        result = dispatcher.run(config)
    except ConfigurationError as exc:
        args.send_parser.print_help(sys.stderr)
        logger.error("%s", exc)
        return 1
    return result.exit_code


def _cmd_version(_args: argparse.Namespace) -> int:
    print(f"os2cw {__version__}")
    return 0


def build_parser(registry: MetricRegistry) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="os2cw",
        description="Send OS metrics to Amazon CloudWatch",
    )
    parser.add_argument("--config", "-c", default=None, help="Path to os2cw.yaml")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command")

    # send
    send_p = sub.add_parser(
        "send",
        help="Send OS metrics to CloudWatch",
        epilog=metrics_help(registry),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    send_p.add_argument("--mem-unit", "-m", default=None, help="memory size unit (b, kb, mb, gb, tb)")
    send_p.add_argument("--vol-unit", "-u", default=None, help="volume size unit (b, kb, mb, gb, tb)")
    send_p.add_argument("--namespace", "-n", default=None, help="CloudWatch namespace")
    send_p.add_argument("--id", "-i", default=None, help="system id to store metrics")
    send_p.add_argument(
        "--volumes", "-v", action="append", default=None,
        help="volumes to report (examples: /,/home,C:)",
    )
    send_p.add_argument(
        "--dryrun", action="store_true", default=None,
        help="output metrics without sending to CloudWatch",
    )
    send_p.add_argument("metrics", nargs="*", metavar="METRIC", help="metric ids, see list below")
    send_p.set_defaults(func=_cmd_send, registry=registry, send_parser=send_p)

    # version
    ver_p = sub.add_parser("version", help="Print version")
    ver_p.set_defaults(func=_cmd_version)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Entry point for the os2cw CLI."""
    parser = build_parser(build_registry())
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if not hasattr(args, "func"):
        parser.print_help()
        sys.exit(1)

    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
