"""
Script to delete recommended actions, for all users or for one user.

Usage:
    python scripts/clear_recommendations.py [--user-id ID]
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

# Add parent directory to path to import coach_api modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlmodel import Session, select  # noqa: E402

from coach_api.core.database import engine  # noqa: E402
from coach_api.models import RecommendedAction  # noqa: E402
from coach_api.services.recommendation_service import clear_actions  # noqa: E402

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def clear_recommendations(user_id: Optional[int] = None) -> int:
    """Delete recommended actions and return how many rows were removed."""
    with Session(engine) as session:
        if user_id is not None:
            return clear_actions(session, user_id)

        try:
            actions = session.exec(select(RecommendedAction)).all()
            for action in actions:
                session.delete(action)
            session.commit()
            logger.info(f"Deleted {len(actions)} recommended action(s)")
            return len(actions)
        except Exception as e:
            session.rollback()
            logger.error("Error clearing recommended actions: %s", e, exc_info=True)
            raise


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Delete recommended actions")
    parser.add_argument("--user-id", type=int, default=None, help="Only delete this user's actions")
    args = parser.parse_args()

    logger.info("Starting recommended action cleanup...")
    try:
        deleted = clear_recommendations(args.user_id)
        logger.info(f"Successfully completed! {deleted} row(s) deleted")
    except Exception as e:
        logger.error("Error during cleanup: %s", e, exc_info=True)
        sys.exit(1)
