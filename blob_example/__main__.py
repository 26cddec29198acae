#!/usr/bin/env python3
"""
Main entry point for the Blob Storage Walkthrough
"""

import argparse
import sys

from azure.core.exceptions import AzureError

from .config import ConfigurationManager
from .driver import BlobWalkthrough
from .storage import MockBlobStorageClient


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Walk through the basic operations of Azure Blob Storage"
    )

    # Add flag for dumping default config
    parser.add_argument(
        "--default-config",
        action="store_true",
        help="Dump default configuration as JSON to stdout and exit",
    )

    # Add flag for showing final config after all overrides
    parser.add_argument(
        "--show-config",
        action="store_true",
        help="Show final configuration after applying all overrides and exit",
    )

    parser.add_argument(
        "--config", "-c", help="Configuration file (JSON format)", default=None
    )

    parser.add_argument(
        "--connection-string",
        help="Azure blob storage connection string "
        "(defaults to $AZURE_STORAGE_CONNECTION_STRING)",
        default=None,
    )

    parser.add_argument("--container", help="Blob storage container name", default=None)

    parser.add_argument(
        "--output", "-o", help="Local file the blob is downloaded to", default=None
    )

    parser.add_argument(
        "--mock",
        action="store_true",
        help="Run against an in-memory storage backend instead of Azure",
    )

    parser.add_argument(
        "--keep",
        action="store_true",
        help="Keep the blob and container instead of deleting them at the end",
    )

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Handle default config flag
    if args.default_config:
        config_manager = ConfigurationManager()
        config_manager.dump_config_json()
        return 0

    # Only include values that were explicitly set by the user via flags
    overrides = {
        "storage": {
            "connection_string": args.connection_string,
            "container_name": args.container,
        },
        "output": {"local_file": args.output},
    }
    if args.keep:
        overrides["cleanup"] = {"delete_blob": False, "delete_container": False}

    config = ConfigurationManager(config_file=args.config, overrides=overrides)

    # Handle show config flag - show final configuration after all overrides
    if args.show_config:
        print("\nFinal Configuration (after all overrides):")
        print("=" * 50)
        config.dump_config_json()
        print("=" * 50)
        return 0

    try:
        client = MockBlobStorageClient() if args.mock else None
        walkthrough = BlobWalkthrough(config, client=client)
        walkthrough.run()
    except (AzureError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
