"""
Print a summary of the stored affinity profile.
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


def main():
    """Main execution function."""
    parser = argparse.ArgumentParser(
        description='Show the stored affinity profile'
    )
    parser.add_argument(
        '--top',
        type=int,
        default=5,
        help='Number of top genres to list (default: 5)'
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

    service = PersonalizationService(
        backend=create_backend(args.backend),
        profile_key=args.profile_key
    )
    print(json.dumps(service.get_stats(top_n=args.top), indent=2))


if __name__ == '__main__':
    main()
