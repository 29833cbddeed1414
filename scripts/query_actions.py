#!/usr/bin/env python3
"""Print persisted recent actions as JSON lines.

Usage:
    python scripts/query_actions.py --since 1700000000
    python scripts/query_actions.py --stats
"""

import argparse
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from src.storage.factory import get_recent_action_store
from src.storage.interfaces import StoreError


def main():
    parser = argparse.ArgumentParser(description="Query stored Codeforces recent actions")
    parser.add_argument("--since", type=int, default=0,
                        help="Only actions with timeSeconds >= this unix timestamp")
    parser.add_argument("--database-url", help="Store URL (defaults to DATABASE_URL / settings)")
    parser.add_argument("--stats", action="store_true", help="Print store statistics instead")
    args = parser.parse_args()

    try:
        store = get_recent_action_store(args.database_url)
        if args.stats:
            stats = store.get_stats()
            print(f"Total actions: {stats['total_actions']}")
            print(f"  blog entries: {stats['blog_entries']}")
            print(f"  comments: {stats['comments']}")
            print(f"Last recorded timestamp: {stats['last_recorded_timestamp']}")
            return 0

        for action in store.query_recent_actions(args.since):
            print(json.dumps(action.to_dict(), ensure_ascii=False))
    except StoreError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
