"""
Rank candidate catalog items against the stored affinity profile.
Accepts one or more candidate files (JSON lists, catalog result pages or CSV)
and prints the personalized shortlist.
"""

import sys
from pathlib import Path

# Add parent directory to path
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

import argparse
import json
import logging

import numpy as np
import pandas as pd

from tvbingefriend_personalization_service.services import (
    PersonalizationService,
    merge_candidate_pools,
)
from tvbingefriend_personalization_service.storage import create_backend

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


def clean_dataframe_for_ranking(df: pd.DataFrame) -> pd.DataFrame:
    """
    Clean a candidates DataFrame read from CSV.

    Replaces NaN/NA with None and decodes JSON-encoded ``genre_ids`` cells.

    Args:
        df: Input DataFrame

    Returns:
        Cleaned DataFrame
    """
    df = df.astype(object).replace({np.nan: None, pd.NA: None})
    df = df.where(pd.notnull(df), None)

    if 'genre_ids' in df.columns:
        df['genre_ids'] = df['genre_ids'].map(_parse_genre_ids)

    return df


def _parse_genre_ids(value):
    if not isinstance(value, str):
        return value
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError:
        return None
    return parsed if isinstance(parsed, list) else None


def load_candidate_file(path: Path) -> list[dict]:
    """
    Load candidate items from a file.

    Args:
        path: JSON list, JSON catalog page (with ``results``) or CSV

    Returns:
        List of candidate item dicts

    Raises:
        ValueError: If the file content is not a candidate list
    """
    if path.suffix.lower() == '.csv':
        df = clean_dataframe_for_ranking(pd.read_csv(path))
        return df.to_dict('records')

    with open(path, encoding='utf-8') as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get('results')
    if not isinstance(data, list):
        raise ValueError(f"{path} does not contain a list of candidates")

    return data


def main():
    """Main execution function."""
    parser = argparse.ArgumentParser(
        description='Rank candidate items against the stored affinity profile'
    )
    parser.add_argument(
        'inputs',
        nargs='+',
        type=Path,
        help='Candidate files (JSON list, catalog page JSON or CSV), merged in order'
    )
    parser.add_argument(
        '--limit',
        type=int,
        default=None,
        help='Shortlist size (default: from config)'
    )
    parser.add_argument(
        '--require-field',
        type=str,
        default=None,
        help='Only rank items where this field is set (e.g. backdrop_path)'
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
    parser.add_argument(
        '--output',
        type=Path,
        default=None,
        help='Also write the shortlist to this CSV file'
    )

    args = parser.parse_args()

    try:
        pools = [load_candidate_file(path) for path in args.inputs]
    except (OSError, ValueError) as e:
        logger.error(f"Could not load candidates: {e}")
        sys.exit(1)

    items = merge_candidate_pools(pools, require_field=args.require_field)
    logger.info(f"Loaded {len(items)} candidates from {len(args.inputs)} file(s)")

    service = PersonalizationService(
        backend=create_backend(args.backend),
        profile_key=args.profile_key
    )
    shortlist = service.recommend(items, limit=args.limit)

    if args.output is not None:
        pd.DataFrame(shortlist).to_csv(args.output, index=False)
        logger.info(f"✓ Wrote {len(shortlist)} ranked items to {args.output}")

    print(json.dumps(shortlist, indent=2, default=str))


if __name__ == '__main__':
    main()
