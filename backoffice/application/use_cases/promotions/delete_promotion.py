"""Use case for deleting promotions."""

import logging

from sqlalchemy.orm import Session

from backoffice.domain.exceptions import NotFoundError
from backoffice.infrastructure.repositories import PromotionRepository

logger = logging.getLogger(__name__)


def delete_promotion(session: Session, promotion_id: int) -> None:
    """Delete the promotion identified by ``promotion_id``."""

    if not PromotionRepository(session).delete(promotion_id):
        raise NotFoundError("Promotion not found.")
    logger.info("Promotion %s deleted", promotion_id)
