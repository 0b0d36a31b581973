#!/usr/bin/env python3
"""Bootstrap a data stream from a JSON config and optionally ship a sample record.

Usage:
  python scripts/bootstrap_data_stream.py config.json [--sample] [--log-file PATH]

Exit codes: 0 ok, 1 bulk write failed, 2 bad config, 3 bootstrap failed.
"""
from __future__ import annotations
import argparse
import os
import sys
import time

# Ensure project root is on sys.path when running as a script
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config_loader import load_config
from data_stream_output import ElasticsearchDataStreamOutput
from datastream_errors import BootstrapError, BulkWriteError, ConfigError
from logger_setup import setup_logger


def main(argv: list[str]) -> int:
    ap = argparse.ArgumentParser(description="Provision an Elasticsearch data stream")
    ap.add_argument("config", help="JSON config file with at least data_stream_name")
    ap.add_argument("--sample", action="store_true", help="Write one sample record after bootstrapping")
    ap.add_argument("--log-file", default=None, help="Also log to this file")
    args = ap.parse_args(argv)

    logger = setup_logger(log_file=args.log_file)

    try:
        out = ElasticsearchDataStreamOutput().configure(load_config(args.config))
    except (ConfigError, TypeError, ValueError) as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    try:
        out.start()
    except BootstrapError as e:
        logger.error("Bootstrap failed: %s", e)
        return 3

    if args.sample:
        record = {"message": "Data stream bootstrap successful", "source": "bootstrap"}
        try:
            failed = out.write([(time.time(), record)])
        except BulkWriteError as e:
            logger.error("%s", e)
            return 1
        if failed:
            return 1
        logger.info("Sample record written to %s", out.data_stream_name)
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
