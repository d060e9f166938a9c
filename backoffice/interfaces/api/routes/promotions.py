"""Routes for managing and redeeming promotions."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from backoffice.application.ports import BroadcastPort, EmailSender
from backoffice.application.use_cases.notifications import FanoutOptions
from backoffice.application.use_cases.promotions import (
    apply_promo_code as apply_promo_code_uc,
    create_promotion as create_promotion_uc,
    delete_promotion as delete_promotion_uc,
    get_promotion as get_promotion_uc,
    get_promotion_stats,
    list_active_promotions as list_active_promotions_uc,
    list_promotions as list_promotions_uc,
    update_promotion as update_promotion_uc,
    validate_promo_code as validate_promo_code_uc,
)
from backoffice.domain.entities import PromotionStatus, User
from backoffice.domain.exceptions import (
    ConflictError,
    NotFoundError,
    ValidationError,
)
from backoffice.infrastructure.database import get_db
from backoffice.interfaces.api.dependencies import (
    get_broadcaster,
    get_email_sender,
    get_fanout_options,
    require_admin,
)
from backoffice.interfaces.api.routes_helpers import page_count, page_offset, to_http_exception
from backoffice.interfaces.api.schemas import (
    ActivePromotionRead,
    Pagination,
    PromoCodeApplyRequest,
    PromoCodeApplyResponse,
    PromoCodeValidateRequest,
    PromoCodeValidateResponse,
    PromotionCounters,
    PromotionCreate,
    PromotionListResponse,
    PromotionRead,
    PromotionStatisticsRead,
    PromotionStatsResponse,
    PromotionSummary,
    PromotionUpdate,
    PromotionUsage,
)

router = APIRouter(prefix="/promotions", tags=["promotions"])


@router.post("", response_model=PromotionRead, status_code=status.HTTP_201_CREATED)
def create_promotion(
    payload: PromotionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
    broadcaster: BroadcastPort | None = Depends(get_broadcaster),
    send_email: EmailSender = Depends(get_email_sender),
    options: FanoutOptions = Depends(get_fanout_options),
) -> PromotionRead:
    """Create a promotion and notify its target audience."""

    try:
        promotion = create_promotion_uc(
            db,
            title=payload.title,
            description=payload.description,
            promo_code=payload.promo_code,
            discount_type=payload.discount_type,
            discount_value=payload.discount_value,
            usage_limit=payload.usage_limit,
            start_date=payload.start_date,
            end_date=payload.end_date,
            target_audience=payload.target_audience,
            status=payload.status,
            min_purchase_amount=payload.min_purchase_amount,
            max_discount_amount=payload.max_discount_amount,
            created_by=current_user,
            broadcaster=broadcaster,
            send_email=send_email,
            options=options,
        )
    except (ValidationError, ConflictError) as exc:
        raise to_http_exception(exc) from exc
    return PromotionRead.model_validate(promotion)


@router.get("", response_model=PromotionListResponse)
def list_promotions(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status_filter: PromotionStatus | None = Query(None, alias="status"),
    target_audience: str | None = Query(None),
    search: str | None = Query(None),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> PromotionListResponse:
    result = list_promotions_uc(
        db,
        status=status_filter.value if status_filter else None,
        target_audience=target_audience,
        search=search,
        skip=page_offset(page, limit),
        limit=limit,
    )
    return PromotionListResponse(
        promotions=[PromotionRead.model_validate(p) for p in result.promotions],
        statistics=PromotionStatisticsRead(
            total=result.statistics.total,
            active=result.statistics.active,
            expired=result.statistics.expired,
        ),
        pagination=Pagination(
            page=page, limit=limit, total=result.total, pages=page_count(result.total, limit)
        ),
    )


@router.get("/stats", response_model=PromotionStatsResponse)
def read_promotion_stats(
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> PromotionStatsResponse:
    stats = get_promotion_stats(db)
    return PromotionStatsResponse(
        promotions=PromotionCounters(
            total=stats.total, active=stats.active, expired=stats.expired, today=stats.today
        ),
        usage=PromotionUsage(total=stats.total_usage),
    )


@router.get("/active", response_model=list[ActivePromotionRead])
def list_active_promotions(db: Session = Depends(get_db)) -> list[ActivePromotionRead]:
    """Return the promotions shoppers can redeem right now."""

    return [ActivePromotionRead.model_validate(p) for p in list_active_promotions_uc(db)]


@router.post("/validate", response_model=PromoCodeValidateResponse)
def validate_promo_code(
    payload: PromoCodeValidateRequest,
    db: Session = Depends(get_db),
) -> PromoCodeValidateResponse:
    """Check a promo code without consuming it."""

    try:
        check = validate_promo_code_uc(db, promo_code=payload.promo_code, amount=payload.amount)
    except (ValidationError, NotFoundError) as exc:
        raise to_http_exception(exc) from exc
    return PromoCodeValidateResponse(
        promotion=PromotionSummary.model_validate(check.promotion),
        discount=check.discount,
    )


@router.post("/apply", response_model=PromoCodeApplyResponse)
def apply_promo_code(
    payload: PromoCodeApplyRequest,
    db: Session = Depends(get_db),
) -> PromoCodeApplyResponse:
    """Redeem a promo code during checkout."""

    try:
        redemption = apply_promo_code_uc(
            db,
            promo_code=payload.promo_code,
            amount=payload.amount,
            user_id=payload.user_id,
        )
    except (ValidationError, NotFoundError) as exc:
        raise to_http_exception(exc) from exc
    return PromoCodeApplyResponse(
        promotion=PromotionSummary.model_validate(redemption.promotion),
        original_amount=redemption.original_amount,
        discount=redemption.discount,
        final_amount=redemption.final_amount,
        savings_percentage=redemption.savings_percentage,
    )


@router.get("/{promotion_id}", response_model=PromotionRead)
def read_promotion(
    promotion_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> PromotionRead:
    try:
        promotion = get_promotion_uc(db, promotion_id)
    except NotFoundError as exc:
        raise to_http_exception(exc) from exc
    return PromotionRead.model_validate(promotion)


@router.put("/{promotion_id}", response_model=PromotionRead)
def update_promotion(
    promotion_id: int,
    payload: PromotionUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> PromotionRead:
    """Apply a partial update to a promotion."""

    changes = payload.model_dump(exclude_unset=True)
    try:
        promotion = update_promotion_uc(db, promotion_id=promotion_id, **changes)
    except (ValidationError, ConflictError, NotFoundError) as exc:
        raise to_http_exception(exc) from exc
    return PromotionRead.model_validate(promotion)


@router.delete("/{promotion_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_promotion(
    promotion_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> Response:
    try:
        delete_promotion_uc(db, promotion_id)
    except NotFoundError as exc:
        raise to_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
