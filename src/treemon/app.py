"""CLI entrypoint for treemon."""
from __future__ import annotations

import argparse
import logging
import time

from .config import assign_instance_id, load_config, persist_instance_id
from .logging_config import configure_logging
from .system.sampler import ResourceSampler
from .system.segment import SegmentStore
from .system.server import StaticServerInfo
from .telemetry.builder import ReportBuilder
from .telemetry.client import TelemetryClient
from .telemetry.reporter import TelemetryReporter

LOGGER = logging.getLogger(__name__)


def main() -> None:
    parser = argparse.ArgumentParser(description="Process tree telemetry reporter")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to configuration file",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Take one sample and send one report, then exit",
    )
    parser.add_argument(
        "--pre-term",
        action="store_true",
        help="Mark the report sent with --once as a shutdown report",
    )
    args = parser.parse_args()

    config = load_config(args.config)
    configure_logging(config)

    if assign_instance_id(config):
        persist_instance_id(config, args.config)

    segment = SegmentStore()
    sampler = ResourceSampler(segment)
    builder = ReportBuilder(config, segment, StaticServerInfo(config.server))
    client = TelemetryClient(config)
    reporter = TelemetryReporter(config, builder, client)

    try:
        if args.once:
            sampler.sample_and_record()
            reporter.report(pre_term=args.pre_term)
        else:
            _run_forever(
                config.telemetry.sample_interval_sec,
                config.telemetry.report_interval_sec,
                segment,
                sampler,
                reporter,
            )
    finally:
        client.close()


def _run_forever(
    sample_interval: float,
    report_interval: float,
    segment: SegmentStore,
    sampler: ResourceSampler,
    reporter: TelemetryReporter,
) -> None:
    next_report = time.monotonic() + report_interval
    last_tick = time.monotonic()
    carry = 0.0
    try:
        while True:
            time.sleep(sample_interval)
            sampler.sample_and_record()

            now = time.monotonic()
            carry += now - last_tick
            last_tick = now
            if carry >= 1.0:
                segment.add_awake(int(carry))
                carry -= int(carry)

            if now >= next_report:
                reporter.report()
                segment.reset()
                next_report = now + report_interval
    except KeyboardInterrupt:
        LOGGER.info("Interrupted, sending final report")
        reporter.report(pre_term=True)


if __name__ == "__main__":
    main()
