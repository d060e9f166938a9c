"""Use case for retrieving a single promotion."""

from sqlalchemy.orm import Session

from backoffice.domain.entities import Promotion
from backoffice.domain.exceptions import NotFoundError
from backoffice.infrastructure.repositories import PromotionRepository


def get_promotion(session: Session, promotion_id: int) -> Promotion:
    promotion = PromotionRepository(session).get(promotion_id)
    if promotion is None:
        raise NotFoundError("Promotion not found.")
    return promotion
