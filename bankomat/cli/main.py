"""Command-line entry point for the console ATM."""

import argparse
from pathlib import Path

from bankomat.cli.console import ConsoleUI
from bankomat.config import BankomatConfig
from bankomat.exceptions import ConfigurationError, StorageError
from bankomat.logging import get_logger, setup_logging
from bankomat.service import BankingService
from bankomat.storage import JsonFileStorage
from bankomat.store import AccountStore

logger = get_logger(__name__)


def build_service(config: BankomatConfig) -> BankingService:
    """Wire storage, store and service for one process.

    Parameters
    ----------
    config : BankomatConfig
        Resolved configuration.

    Returns
    -------
    BankingService
        Service over an initialized store.
    """
    storage = JsonFileStorage(config.storage.data_dir, pretty=config.storage.pretty_json)
    store = AccountStore(storage)
    store.initialize()
    return BankingService(
        store,
        max_pin_tries=config.atm.max_pin_tries,
        history_limit=config.atm.history_limit,
        currency=config.atm.currency,
    )


def main(argv: list[str] | None = None) -> int:
    """Run the console ATM."""
    parser = argparse.ArgumentParser(
        prog="bankomat",
        description="Console ATM simulator backed by JSON account files.",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory holding accounts.json and transactions.json (default: ./data)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Log level (default: LOG_LEVEL or WARNING)",
    )
    parser.add_argument(
        "--log-format",
        choices=["standard", "json"],
        default=None,
        help="Log output format",
    )
    args = parser.parse_args(argv)

    try:
        config = BankomatConfig.from_env()
    except ConfigurationError as exc:
        parser.error(str(exc))

    if args.data_dir is not None:
        config.storage.data_dir = args.data_dir
    if args.log_level is not None:
        config.log_level = args.log_level
    if args.log_format is not None:
        config.log_format = args.log_format

    setup_logging(level=config.log_level, format_type=config.log_format)

    try:
        service = build_service(config)
        ConsoleUI(service).run()
    except StorageError:
        logger.exception("Storage failure, terminating")
        return 1
    return 0
