"""Session ownership for the deal, chat and account services.

Route handlers inject a request-scoped session; scripts and tests may build a
service without one and let it open a session from the global factory. In that
case the service also closes it on ``__exit__``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy.orm import Session

from timeless.database import db as db_module

logger = logging.getLogger(__name__)


class BaseService:
    """Base for services whose mutations must commit as one unit."""

    def __init__(self, db: Session | None = None) -> None:
        self._owns_session = db is None
        self.db = db or db_module.SessionLocal()

    @contextmanager
    def write(self, event: str, **context: Any) -> Iterator[Session]:
        """Commit everything done inside the block, or roll all of it back.

        ``event`` names the mutation (``deal.create``, ``chat.send``...) and is
        logged with ``context`` when the block fails.
        """
        try:
            yield self.db
            self.db.commit()
        except Exception as exc:
            self.db.rollback()
            logger.info(
                f"{event}.rolled_back",
                extra={
                    "event": f"{event}.rolled_back",
                    "context": {**context, "error": type(exc).__name__},
                },
            )
            raise

    def rollback(self) -> None:
        self.db.rollback()

    def close(self) -> None:
        self.db.close()

    def __enter__(self) -> "BaseService":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type:
            self.rollback()
        if self._owns_session:
            self.close()
