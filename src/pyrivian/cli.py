"""Command-line front end: ``rivian-cli``."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import dataclasses
import logging
import os
import sys
from collections.abc import Iterable, Sequence

from dotenv import load_dotenv

from pyrivian.client import RivianClient
from pyrivian.config import PollConfig, RivianConfig
from pyrivian.exceptions import (
    RivianAuthenticationError,
    RivianConfigError,
    RivianError,
    RivianNotAuthenticatedError,
    RivianTransportError,
)
from pyrivian.models.order import VehicleDetails
from pyrivian.models.vehicle_state import FieldSetTier
from pyrivian.polling.scheduler import AdaptiveScheduler
from pyrivian.reporting import CsvPollReporter, format_orders, format_vehicle_state, format_vehicles

_logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="rivian-cli", description="Query and poll a Rivian vehicle.")
    parser.add_argument("--login", action="store_true", help="Login to account")
    parser.add_argument("--logout", action="store_true", help="Forget stored credentials")
    parser.add_argument("--vehicle_orders", action="store_true", help="Display vehicle orders")
    parser.add_argument("--vehicles", action="store_true", help="Display vehicles")
    parser.add_argument("--state", action="store_true", help="Get vehicle state")
    parser.add_argument("--vehicle_id", help="Vehicle to query (defaults to first one found)")
    parser.add_argument("--poll", action="store_true", help="Poll vehicle state")
    parser.add_argument("--poll_frequency", type=int, metavar="SEC", help="Poll frequency (in seconds)")
    parser.add_argument(
        "--poll_show_all",
        action="store_true",
        default=None,
        help="Show all poll results even if no changes occurred",
    )
    parser.add_argument(
        "--poll_inactivity_wait",
        type=int,
        metavar="SEC",
        help="If not sleeping and nothing changes for this period of time, then do a poll_sleep_wait. "
        "Defaults to 0 for continual polling at poll_frequency",
    )
    parser.add_argument(
        "--poll_sleep_wait",
        type=int,
        metavar="SEC",
        help="How long to stop polling to let the car go to sleep (depends on poll_inactivity_wait)",
    )
    parser.add_argument("--query", action="store_true", help="Single poll instance (quick poll)")
    parser.add_argument("--metric", action="store_true", help="Use metric vs imperial units")
    parser.add_argument("--privacy", action="store_true", help="Fuzz order/vin info and hide location")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    parser.add_argument("--all", action="store_true", help="Run all commands silently as a test of all commands")
    return parser


def _emit(lines: Iterable[str]) -> None:
    for line in lines:
        print(line)


async def _prompt_otp() -> str:
    return await asyncio.to_thread(input, "Enter OTP: ")


def resolve_vehicle_id(vehicles: Sequence[VehicleDetails], requested: str | None) -> str | None:
    """Pick the requested vehicle, or the first one when none was requested."""
    if requested:
        return requested if any(v.vehicle_id == requested for v in vehicles) else None
    return vehicles[0].vehicle_id if vehicles else None


async def run(args: argparse.Namespace) -> int:
    config = RivianConfig.from_env()
    poll_config = PollConfig.from_env(
        poll_frequency=args.poll_frequency,
        inactivity_wait=args.poll_inactivity_wait,
        sleep_wait=args.poll_sleep_wait,
        show_all=args.poll_show_all,
        metric=args.metric,
        privacy=args.privacy,
    )

    async with RivianClient(config) as client:
        if args.logout:
            removed = client.store.clear()
            print("Stored credentials removed" if removed else "No stored credentials")

        if args.login:
            try:
                await client.login(_prompt_otp)
            except RivianAuthenticationError as exc:
                print(f"Authentication failed, check RIVIAN_USERNAME, RIVIAN_PASSWORD and the OTP code: {exc}")
                return 1
            print("Login successful")

        resolve_vehicle = args.vehicles or args.state or args.poll or args.query or args.all

        orders = []
        if args.vehicle_orders or resolve_vehicle:
            orders = await client.get_vehicle_orders()
        if args.vehicle_orders or args.all:
            _emit(format_orders(orders, privacy=args.privacy))

        vehicle_id = args.vehicle_id
        if resolve_vehicle:
            vehicles = await client.get_vehicles(orders)
            vehicle_id = resolve_vehicle_id(vehicles, args.vehicle_id)
            if vehicle_id is None:
                print(f"Didn't find vehicle ID {args.vehicle_id}" if args.vehicle_id else "No Vehicles found")
                return 1
            if args.vehicles or args.all:
                _emit(format_vehicles(vehicles, privacy=args.privacy))

        if args.state or args.all:
            try:
                snapshot = await client.fetch_snapshot(vehicle_id, FieldSetTier.FULL)
            except RivianTransportError as exc:
                _logger.debug("Vehicle state failed: %s", exc)
                print("Unable to retrieve vehicle state, try with --verbose")
            else:
                _emit(format_vehicle_state(snapshot, metric=args.metric, privacy=args.privacy))

        if args.poll or args.query or args.all:
            single_shot = args.query or args.all
            scheduler = AdaptiveScheduler(
                client,
                CsvPollReporter(metric=args.metric, privacy=args.privacy),
                vehicle_id,
                dataclasses.replace(poll_config, single_shot=single_shot),
            )
            await scheduler.run()

    return 0


def main(argv: Sequence[str] | None = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if not args.all:
            return asyncio.run(run(args))

        print("Running all commands silently")
        with open(os.devnull, "w") as devnull, contextlib.redirect_stdout(devnull):
            code = asyncio.run(run(args))
        if code == 0:
            print("All commands ran and no exceptions encountered")
        return code
    except KeyboardInterrupt:
        return 0
    except RivianNotAuthenticatedError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except RivianConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2
    except RivianError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
