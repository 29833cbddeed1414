"""Database operations for recent action storage."""

from typing import Optional, List
from pathlib import Path

from sqlalchemy import func, text
from sqlalchemy.orm import sessionmaker
from sqlalchemy.exc import SQLAlchemyError
import structlog

from .models import RecentActionModel, init_db
from .interfaces import CodeforcesStore, StoreError, StoreConnectionError
from ..ingestion.interfaces import RecentAction
from ..config.settings import get_settings

logger = structlog.get_logger()


class RecentActionStore(CodeforcesStore):
    """SQLAlchemy-backed store for recent actions (SQLite or PostgreSQL)."""

    def __init__(self, database_url: str = None):
        if database_url is None:
            database_url = get_settings().database_url
        logger.info("creating_store", url=database_url[:40] + "...")

        try:
            # Ensure data directory exists
            if database_url.startswith("sqlite:///"):
                db_path = database_url.replace("sqlite:///", "")
                Path(db_path).parent.mkdir(parents=True, exist_ok=True)

            self.engine = init_db(database_url)
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            logger.error("store_connection_failed", error=str(e))
            raise StoreConnectionError(f"could not connect to store with error [{e}]") from e

        self.Session = sessionmaker(bind=self.engine)

    def add_recent_actions(self, actions: Optional[List[RecentAction]]) -> None:
        """Add a batch of actions to the store in one transaction."""
        if not actions:
            return
        logger.info("persisting_actions", count=len(actions))

        session = self.Session()
        try:
            session.add_all([
                RecentActionModel(
                    time_seconds=action.time_seconds,
                    blog_entry=action.blog_entry,
                    comment=action.comment,
                )
                for action in actions
            ])
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.debug("failed_batch", timestamps=[a.time_seconds for a in actions])
            raise StoreError(f"bulk insert failed with error [{e}]") from e
        finally:
            session.close()

    def query_recent_actions(self, timestamp: int) -> List[RecentAction]:
        """Get all actions that happened at or after timestamp."""
        logger.info("querying_actions", since=timestamp)

        session = self.Session()
        try:
            models = session.query(RecentActionModel)\
                .filter(RecentActionModel.time_seconds >= timestamp)\
                .order_by(RecentActionModel.time_seconds, RecentActionModel.id)\
                .all()
            actions = [self._model_to_action(m) for m in models]
        except SQLAlchemyError as e:
            raise StoreError(f"could not query recent actions with error [{e}]") from e
        finally:
            session.close()

        logger.info("actions_retrieved", count=len(actions))
        return actions

    def last_recorded_timestamp(self) -> int:
        """Latest activity timestamp of any blog/comment in the store.

        Returns 0 if there is no row or the query fails.
        """
        session = self.Session()
        try:
            latest = session.query(func.max(RecentActionModel.time_seconds)).scalar()
        except SQLAlchemyError as e:
            logger.error("max_timestamp_query_failed", error=str(e))
            return 0
        finally:
            session.close()
        return int(latest or 0)

    def get_stats(self) -> dict:
        """Get database statistics."""
        session = self.Session()
        try:
            total = session.query(RecentActionModel).count()
            blog_entries = session.query(RecentActionModel)\
                .filter(RecentActionModel.comment.is_(None)).count()
        except SQLAlchemyError as e:
            raise StoreError(f"could not compute store stats with error [{e}]") from e
        finally:
            session.close()

        return {
            "total_actions": total,
            "blog_entries": blog_entries,
            "comments": total - blog_entries,
            "last_recorded_timestamp": self.last_recorded_timestamp(),
        }

    def close(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()

    def _model_to_action(self, model: RecentActionModel) -> RecentAction:
        """Convert database model to RecentAction."""
        return RecentAction(
            time_seconds=model.time_seconds,
            blog_entry=model.blog_entry,
            comment=model.comment,
        )
