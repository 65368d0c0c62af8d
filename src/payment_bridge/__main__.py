"""Command line entrypoint: ``python -m payment_bridge``."""

from __future__ import annotations

import argparse
from collections.abc import Sequence

import uvicorn

from payment_bridge.app import create_app
from payment_bridge.core.config import Settings, get_settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="payment-bridge",
        description="YooKassa payment links and BillingEvent reconciliation",
    )
    parser.add_argument(
        "--kubeconfig",
        default=None,
        help="Path to a kubeconfig file; in-cluster credentials are used when omitted",
    )
    parser.add_argument("--host", default=None, help="Bind address")
    parser.add_argument("--port", type=int, default=None, help="Bind port")
    parser.add_argument("--log-level", default=None, help="Log level (INFO, DEBUG, ...)")
    return parser


def apply_arguments(settings: Settings, args: argparse.Namespace) -> Settings:
    """Return ``settings`` with command line overrides applied."""

    updates: dict[str, object] = {}
    if args.host:
        updates["host"] = args.host
    if args.port:
        updates["port"] = args.port
    if args.log_level:
        updates["log_level"] = args.log_level.upper()
    if args.kubeconfig:
        updates["kubernetes"] = settings.kubernetes.model_copy(
            update={"kubeconfig": args.kubeconfig}
        )
    return settings.model_copy(update=updates)


def main(argv: Sequence[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    settings = apply_arguments(get_settings(), args)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
