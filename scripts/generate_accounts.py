#!/usr/bin/env python3
"""Generate an accounts.json file with synthetic cardholders.

The ATM never creates accounts itself; use this script to populate a data
directory with more accounts than the three seeded on first run. An
existing transactions.json in the directory is left untouched.
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from bankomat.generators import AccountGenerator
from bankomat.logging import get_logger, setup_logging
from bankomat.storage import JsonFileStorage, to_dict

logger = get_logger("generate_accounts")


def main() -> None:
    """Write generated accounts to <data-dir>/accounts.json."""
    parser = argparse.ArgumentParser(description="Generate ATM accounts")
    parser.add_argument("--data-dir", type=Path, default=Path("data"), help="Output directory")
    parser.add_argument("--count", type=int, default=10, help="Number of accounts")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--locale", default="pl_PL", help="Faker locale for owner names")
    parser.add_argument(
        "--force", action="store_true", help="Overwrite an existing accounts.json"
    )
    args = parser.parse_args()

    setup_logging(level="INFO")

    storage = JsonFileStorage(args.data_dir, pretty=True)
    if storage.exists("accounts") and not args.force:
        parser.error(f"{storage.path_for('accounts')} exists, pass --force to overwrite")
    storage.ensure_directory()

    generator = AccountGenerator(seed=args.seed, locale=args.locale)
    accounts = list(generator.generate_batch(args.count))
    storage.write_collection("accounts", [to_dict(a) for a in accounts])

    logger.info("Saved %d accounts to %s", len(accounts), storage.path_for("accounts"))
    for account in accounts:
        print(f"{account.id:>4}  {account.owner:<15} {account.card}  PIN {account.pin}")


if __name__ == "__main__":
    main()
