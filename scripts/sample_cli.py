"""CLI script for sampling recommendations from a category distribution.

Useful for testing and evaluation. Loads a catalog, samples items for a
distribution and prints them with a per-category breakdown.

Usage:
    python scripts/sample_cli.py --distribution '{"1": 0.5, "2": 0.5}' --limit 10
"""

import argparse
import json
import logging
import sys
from collections import Counter
from pathlib import Path
from typing import Dict, List

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from listingrec.catalog.models import ItemSummary
from listingrec.catalog.service import ItemService
from listingrec.catalog.store import (
    InMemoryCatalog,
    check_snapshot_exists,
    load_catalog_from_csv,
    load_catalog_snapshot,
    load_users_from_csv,
    load_users_snapshot,
    save_catalog_snapshot,
)
from listingrec.catalog.users import UserDirectory

# Setup logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s"
)
logger = logging.getLogger(__name__)


def load_catalog(data_dir: str, snapshot_dir: str) -> InMemoryCatalog:
    """Load the snapshot if present, otherwise the CSV files."""
    if check_snapshot_exists(snapshot_dir):
        return load_catalog_snapshot(snapshot_dir)
    return load_catalog_from_csv(data_dir)


def load_users(data_dir: str, snapshot_dir: str) -> UserDirectory:
    """Load users from the same source load_catalog picks."""
    if check_snapshot_exists(snapshot_dir):
        return load_users_snapshot(snapshot_dir)
    return load_users_from_csv(data_dir)


def category_breakdown(
    catalog: InMemoryCatalog, items: List[ItemSummary]
) -> Dict[int, int]:
    """Count sampled items per category id."""
    counts: Counter = Counter()
    for summary in items:
        counts[catalog.get_item(summary.id).category_id] += 1
    return dict(counts)


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Sample items from a category distribution",
    )
    parser.add_argument(
        "--distribution",
        required=True,
        help='JSON object of category id to weight, e.g. \'{"1": 0.7, "2": 0.3}\'',
    )
    parser.add_argument("--limit", type=int, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--data-dir", default="data")
    parser.add_argument("--snapshot-dir", default="models")
    parser.add_argument(
        "--save-snapshot",
        action="store_true",
        help="Write a joblib snapshot of the loaded catalog",
    )
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.INFO)

    try:
        distribution = json.loads(args.distribution)
    except json.JSONDecodeError as e:
        print(f"Error: --distribution is not valid JSON: {e}")
        return 1
    if not isinstance(distribution, dict):
        print("Error: --distribution must be a JSON object")
        return 1

    try:
        catalog = load_catalog(args.data_dir, args.snapshot_dir)
        users = load_users(args.data_dir, args.snapshot_dir)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error loading catalog: {e}")
        print("Run scripts/generate_fake_catalog.py first.")
        return 1

    if args.save_snapshot:
        path = save_catalog_snapshot(catalog, args.snapshot_dir, users=users)
        print(f"Saved snapshot to {path}")

    service = ItemService(catalog, users=users)
    items = service.get_items_by_distribution(
        distribution, limit=args.limit, seed=args.seed
    )

    print(f"\n{'='*60}")
    print(f"Sampled {len(items)} items")
    print(f"{'='*60}")
    for rank, summary in enumerate(items, 1):
        print(f"{rank:4d}. [{summary.id}] {summary.title} - {summary.price:.2f}")

    print("\nPer category:")
    for category_id, count in sorted(category_breakdown(catalog, items).items()):
        weight = distribution.get(str(category_id))
        print(f"  category {category_id}: {count} items (weight {weight})")

    return 0


if __name__ == "__main__":
    sys.exit(main())
