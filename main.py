#!/usr/bin/env python3
"""
Acteedog - Activity Connectors

Main entry point for Acteedog. Fetches a day of activity from a connector,
or enriches a single context, and prints the result as JSON.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from acteedog import __version__
from acteedog.config import config
from acteedog.connectors import CONNECTORS, create_connector
from acteedog.core.errors import ConnectorError
from acteedog.models import Context


def setup_logging():
    """Configure logging for the application."""
    level = getattr(logging, config.get("logging.level", "INFO").upper())
    format_str = config.get("logging.format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    log_file = config.log_filename

    # stdout carries the JSON result, so log records go to stderr
    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stderr),
            logging.FileHandler(log_file)
        ]
    )


def write_json(data: Any, output: Optional[str] = None):
    """
    Write a JSON document to a file, or to stdout when no file is given.

    Args:
        data: JSON-serializable data
        output: Optional output file path
    """
    text = json.dumps(data, indent=2, ensure_ascii=False)

    if output:
        with open(output, 'w', encoding='utf-8') as f:
            f.write(text + "\n")
        logging.info(f"Wrote output to {output}")
    else:
        print(text)


def run_fetch(connector_id: str, target_date: str, output: Optional[str] = None):
    """
    Fetch the activities of one day and write them as JSON.

    Args:
        connector_id: Connector to fetch from
        target_date: YYYY-MM-DD or RFC3339 timestamp
        output: Optional output file path
    """
    connector = create_connector(connector_id, config.get_connector_config(connector_id) or {},
                                 logger=logging.getLogger(f"acteedog.{connector_id}"))

    activities = connector.fetch_activities(target_date)
    logging.info(f"Fetched {len(activities)} activities from {connector_id}")

    write_json([activity.to_json_dict() for activity in activities], output)


def run_enrich(connector_id: str, context_file: str, output: Optional[str] = None):
    """
    Enrich one context read from a JSON file and write it back as JSON.

    Args:
        connector_id: Connector that owns the context
        context_file: Path to a Context JSON document
        output: Optional output file path
    """
    with open(context_file, 'r', encoding='utf-8') as f:
        data = json.load(f)

    try:
        context = Context.model_validate(data)
    except ValidationError as e:
        raise ConnectorError(f"invalid context in {context_file}: {e}") from e

    connector = create_connector(connector_id, config.get_connector_config(connector_id) or {},
                                 logger=logging.getLogger(f"acteedog.{connector_id}"))

    enriched = connector.enrich_context(context)
    write_json(enriched.to_json_dict(), output)


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Acteedog - Activity Connectors",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py fetch github --date 2025-11-18                   # Print GitHub activity as JSON
  python main.py fetch slack --date 2025-12-13 --output out.json  # Save Slack activity to a file
  python main.py enrich github --context-file context.json        # Enrich a single context
        """
    )

    parser.add_argument(
        "--config",
        type=str,
        default="config.yaml",
        help="Path to the configuration file (default: config.yaml)"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Acteedog {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    fetch_parser = subparsers.add_parser("fetch", help="Fetch one day of activity")
    fetch_parser.add_argument(
        "connector",
        choices=sorted(CONNECTORS),
        help="Connector to fetch from"
    )
    fetch_parser.add_argument(
        "--date",
        required=True,
        help="Target day as YYYY-MM-DD or an RFC3339 timestamp"
    )
    fetch_parser.add_argument(
        "--output",
        type=str,
        help="Write the JSON result to this file instead of stdout"
    )

    enrich_parser = subparsers.add_parser("enrich", help="Enrich a single context")
    enrich_parser.add_argument(
        "connector",
        choices=sorted(CONNECTORS),
        help="Connector that owns the context"
    )
    enrich_parser.add_argument(
        "--context-file",
        required=True,
        help="Path to the Context JSON document to enrich"
    )
    enrich_parser.add_argument(
        "--output",
        type=str,
        help="Write the JSON result to this file instead of stdout"
    )

    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point."""
    args = parse_arguments(argv)

    if args.config != str(config.config_path):
        config.config_path = Path(args.config)
        config.reload()

    setup_logging()

    try:
        if args.command == "fetch":
            run_fetch(args.connector, args.date, args.output)
        else:
            run_enrich(args.connector, args.context_file, args.output)

    except KeyboardInterrupt:
        logging.info("Interrupted by user")
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(1)

    except (ConnectorError, OSError, json.JSONDecodeError) as e:
        logging.error(f"{args.command} failed: {e}")
        print(f"\n{args.command.capitalize()} failed: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
