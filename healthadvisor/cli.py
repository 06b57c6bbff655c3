"""CLI entrypoint: geocode outpatient service records and index them."""

from __future__ import annotations

import argparse
import csv
import sys
from pathlib import Path

from healthadvisor.common.config_loader import http_settings, load_app_config
from healthadvisor.common.constants import EXIT_EARLY_RETURN, EXIT_HARD_FAIL, EXIT_SUCCESS
from healthadvisor.common.errors import ConfigError, InfrastructureError
from healthadvisor.common.http import HttpClient
from healthadvisor.common.ids import generate_run_id
from healthadvisor.common.logging import build_logger, log_event
from healthadvisor.pipeline.enrich import run_enrichment
from healthadvisor.pipeline.geocode import GoogleGeocoder
from healthadvisor.pipeline.records import skip_header
from healthadvisor.pipeline.search_index import ElasticsearchIndex, build_base_url


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--files", default=None, help="CSV file to process (a single path)")
    parser.add_argument("--records", type=int, default=0, help="Number of rows to attempt after the header")
    parser.add_argument("--search-hostname", default=None)
    parser.add_argument("--search-port", default=None)
    parser.add_argument("--config", default=None)
    parser.add_argument("--overlay-config", default=None)
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARN", "ERROR"])
    parser.add_argument("--log-dir", default=None)
    parser.add_argument("--run-id", default=None)
    return parser.parse_args(argv)


def validate_args(args: argparse.Namespace) -> None:
    if not args.files:
        raise ConfigError("No file was specified")
    if args.records <= 0:
        raise ConfigError("No records to process, will exit")
    if not args.search_hostname:
        raise ConfigError("No search hostname provided, will exit")
    if not args.search_port:
        raise ConfigError("No search port provided, will exit")


def run_command(args: argparse.Namespace) -> int:
    run_id = args.run_id or generate_run_id()
    logger = build_logger(run_id, log_dir=Path(args.log_dir) if args.log_dir else None, level=args.log_level)

    try:
        validate_args(args)
        cfg = load_app_config(
            Path(args.config) if args.config else None,
            overlay_path=Path(args.overlay_config) if args.overlay_config else None,
        )
        # Undecodable bytes stay confined to their own row.
        data_file = open(args.files, "r", encoding="utf-8", errors="replace", newline="")
    except ConfigError as exc:
        log_event(logger, str(exc), run_id=run_id, event="CONFIG_FAIL", status="error", error_code=exc.error_code)
        return EXIT_EARLY_RETURN
    except OSError as exc:
        log_event(
            logger,
            f"error trying to read file '{args.files}': {exc}",
            run_id=run_id,
            event="CONFIG_FAIL",
            status="error",
            error_code=ConfigError.error_code,
        )
        return EXIT_EARLY_RETURN

    search_cfg = cfg["search"]
    timeout, retry = http_settings(cfg)
    base_url = build_base_url(args.search_hostname, args.search_port, scheme=search_cfg["scheme"])

    with data_file, HttpClient(timeout=timeout, retry=retry) as http_client:
        rows = csv.reader(data_file)
        skip_header(rows)

        geocoder = GoogleGeocoder(
            http_client,
            endpoint=cfg["geocoder"]["endpoint"],
            api_key=cfg["geocoder"]["api_key"],
        )
        search_index = ElasticsearchIndex(http_client, base_url)

        log_event(
            logger,
            f"processing up to {args.records} records from {args.files} into {base_url}",
            run_id=run_id,
            index=search_cfg["index_name"],
            event="RUN_START",
            status="ok",
        )
        try:
            cluster = search_index.ping()
            log_event(logger, f"connected to search service: {cluster}", run_id=run_id, event="RUN_START", status="ok")
            summary = run_enrichment(
                rows,
                args.records,
                geocoder,
                search_index,
                logger,
                run_id=run_id,
                index_name=search_cfg["index_name"],
                document_type=search_cfg["document_type"],
            )
        except InfrastructureError as exc:
            log_event(logger, str(exc), run_id=run_id, event="RUN_FAIL", status="error", error_code=exc.error_code)
            return EXIT_HARD_FAIL

    log_event(
        logger,
        f"run finished: {summary.to_dict()}",
        run_id=run_id,
        index=search_cfg["index_name"],
        event="RUN_END",
        status="ok" if summary.failed == 0 else "partial",
        attempted=summary.attempted,
        indexed=summary.indexed,
        failed=summary.failed,
    )
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    return run_command(args)


if __name__ == "__main__":
    raise SystemExit(main())
