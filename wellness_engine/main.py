"""
Wellness Profile Engine: command-line entry point.

Runs the analysis pipeline for one user and prints the resulting profile
as JSON on stdout.

Supports execution modes:
- Normal: MongoDB stores (MONGODB_URI), profile written back
- Dry run: in-memory stores, optionally seeded from a JSON file
- Show: read the current profile without recomputation
"""

import os
import sys
import argparse
import json
import logging
import random
from typing import Any, Dict, Optional, Tuple

from dotenv import load_dotenv

# Add project root for nested imports
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from wellness_engine.adapters.repositories import mongo as mongo_client
from wellness_engine.adapters.repositories.base import StoreError
from wellness_engine.adapters.repositories.memory import (
    InMemoryActivityStore, InMemoryMessageStore, InMemoryProfileStore,
)
from wellness_engine.core.models import Activity, Message
from wellness_engine.core.profile import WellnessProfileService, safe_default_profile
from wellness_engine.utils.logger import setup_logger

logger = logging.getLogger("wellness_engine.main")


# ============================================================================
# ARGUMENT PARSING
# ============================================================================

def parse_arguments(argv: Optional[list] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Wellness Profile Engine: analyze a user's conversations and activities",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run.py --user-id u1                                # Analyze and store
  python run.py --user-id u1 --show                         # Read current profile
  python run.py --user-id u1 --dry-run --data sample.json   # No database
  python run.py --user-id u1 --dry-run --seed 42            # Reproducible choices
        """
    )

    parser.add_argument("--user-id", required=True, help="User to analyze")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Use in-memory stores instead of MongoDB"
    )
    parser.add_argument(
        "--data",
        help="JSON file with 'messages' and 'activities' lists (dry run only)"
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Print the stored profile without recomputing it"
    )
    parser.add_argument("--seed", type=int, help="Seed for template and practice selection")

    return parser.parse_args(argv)


# ============================================================================
# STORE SETUP
# ============================================================================

def load_dry_run_data(path: Optional[str]) -> Dict[str, Any]:
    if not path:
        return {"messages": [], "activities": []}
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def build_dry_run_stores(user_id: str, data: Dict[str, Any]) -> Tuple:
    message_store = InMemoryMessageStore()
    for item in data.get("messages", []):
        message_store.add_message(user_id, Message.from_dict(item))

    activity_store = InMemoryActivityStore()
    for item in data.get("activities", []):
        activity_store.create_activity(user_id, Activity.from_dict(item))

    logger.info(
        f"Dry run: {len(data.get('messages', []))} messages, "
        f"{len(data.get('activities', []))} activities loaded"
    )
    return message_store, activity_store, InMemoryProfileStore()


# ============================================================================
# MAIN EXECUTION
# ============================================================================

def main(argv: Optional[list] = None) -> int:
    load_dotenv()
    args = parse_arguments(argv)
    setup_logger("wellness_engine")

    if args.dry_run:
        logger.info("--- DRY RUN MODE ACTIVATED ---")
    logger.info(f"--- Wellness Profile Engine Starting (user {args.user_id}) ---")

    try:
        if args.dry_run:
            stores = build_dry_run_stores(args.user_id, load_dry_run_data(args.data))
        else:
            stores = mongo_client.build_stores()
    except (StoreError, OSError, ValueError) as setup_error:
        logger.error(f"Store setup failed: {setup_error}")
        logger.warning("[WARN] FALLBACK MODE: Returning default profile")
        print(json.dumps(safe_default_profile(args.user_id).to_dict(), indent=2))
        return 1

    rng = random.Random(args.seed) if args.seed is not None else None
    service = WellnessProfileService(*stores, rng=rng)

    if args.show:
        profile = service.get_profile(args.user_id)
    else:
        profile = service.analyze_and_update_profile(args.user_id)

    print(json.dumps(profile.to_dict(), indent=2))
    logger.info(f">>> WELLNESS SCORE: {profile.wellness_score} <<<")
    logger.info("--- Execution Complete ---")
    return 0


if __name__ == "__main__":
    sys.exit(main())
