"""
Record one "open details" interaction against the stored affinity profile.
"""

import sys
from pathlib import Path

# Add parent directory to path
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

import argparse
import json
import logging

from tvbingefriend_personalization_service.services import PersonalizationService
from tvbingefriend_personalization_service.storage import create_backend

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


def parse_item(item_json: str | None = None, item_file: Path | None = None) -> dict:
    """
    Read the interacted item from inline JSON or a JSON file.

    Args:
        item_json: Inline JSON object
        item_file: Path to a JSON file holding one object

    Returns:
        Item dict

    Raises:
        ValueError: If neither source holds a JSON object
    """
    if item_file is not None:
        with open(item_file, encoding='utf-8') as f:
            item = json.load(f)
    elif item_json is not None:
        item = json.loads(item_json)
    else:
        raise ValueError("Provide --item or --item-file")

    if not isinstance(item, dict):
        raise ValueError("Item must be a JSON object")

    return item


def main():
    """Main execution function."""
    parser = argparse.ArgumentParser(
        description='Record an item the visitor opened'
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        '--item',
        type=str,
        help='Item as inline JSON, e.g. \'{"id": 1, "name": "A", "genre_ids": [18]}\''
    )
    source.add_argument(
        '--item-file',
        type=Path,
        help='Path to a JSON file holding the item'
    )
    parser.add_argument(
        '--backend',
        type=str,
        default=None,
        help='Preference backend: memory, file, database or blob (default: from config)'
    )
    parser.add_argument(
        '--profile-key',
        type=str,
        default=None,
        help='Preference slot name (default: from config)'
    )

    args = parser.parse_args()

    try:
        item = parse_item(item_json=args.item, item_file=args.item_file)
    except (OSError, ValueError) as e:
        logger.error(f"Could not read item: {e}")
        sys.exit(1)

    service = PersonalizationService(
        backend=create_backend(args.backend),
        profile_key=args.profile_key
    )
    service.record_interaction(item)

    if service.store.has_unpersisted_changes:
        logger.warning("Profile could not be persisted")
    else:
        logger.info(f"✓ Recorded interaction with item {item.get('id')}")

    print(json.dumps(service.get_profile().to_dict(), indent=2, sort_keys=True))


if __name__ == '__main__':
    main()
