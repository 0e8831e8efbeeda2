"""
HerbScape Backend — Herb Service
==================================

What:  Reads the herb catalog from the `herbs` table.
How:   One unfiltered SELECT per call; rows are converted to HerbRecord.
Who:   Called by CatalogPage.mount() when a client's page is first shown.

Query plan:
    SELECT * FROM herbs
    → No pagination and no server-side filtering; the catalog is small and
      is narrowed in memory by catalog.filtering.
"""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from herbscape.exceptions import DatabaseError
from herbscape.models.herb import Herb
from herbscape.schemas.herb import HerbRecord

logger = logging.getLogger(__name__)


class HerbService:
    """Read-only access to catalog rows."""

    async def fetch_all(self, db: AsyncSession) -> List[HerbRecord]:
        """
        Fetch every herb row.

        Args:
            db: Async database session (injected by FastAPI)

        Returns:
            All rows as HerbRecord, in table order.

        Raises:
            DatabaseError: Query execution failed
        """
        try:
            result = await db.execute(select(Herb))
            rows = list(result.scalars().all())
        except Exception as e:
            logger.error("Database error fetching herbs: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not load the herb catalog. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("Fetched %d herbs", len(rows))
        return [HerbRecord.model_validate(row) for row in rows]


# ── Singleton Instance ────────────────────────────────────────────────────
herb_service = HerbService()
