from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from api.common import get_now, to_http_error
from auth.utils import get_current_user
from db.database import get_db
from db.models import User
from services.errors import ProductivityError
from services.heatmap_service import build_heatmap, heatmap_rows
from services.review_service import end_day, get_review, list_reviews, review_to_dict
from utils.datetime_utils import parse_day

router = APIRouter(prefix="/reviews", tags=["reviews"], dependencies=[Depends(get_current_user)])


@router.post("/end-day")
def end_current_day(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Create today's review; a repeat call returns the stored one with 200."""
    try:
        result = end_day(db, user.id, now)
    except ProductivityError as exc:
        raise to_http_error(exc)
    return JSONResponse(
        status_code=201 if result.created else 200,
        content={"created": result.created, "review": review_to_dict(result.review)},
    )


@router.get("")
def get_reviews(
    limit: Optional[int] = Query(default=None, ge=1),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        reviews = list_reviews(db, user.id, limit)
    except ProductivityError as exc:
        raise to_http_error(exc)
    return [review_to_dict(r) for r in reviews]


@router.get("/heatmap")
def get_heatmap(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    try:
        buckets = build_heatmap(db, user.id, now)
    except ProductivityError as exc:
        raise to_http_error(exc)
    return heatmap_rows(buckets)


@router.get("/{day}")
def get_review_for_day(
    day: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        review = get_review(db, user.id, parse_day(day))
    except ProductivityError as exc:
        raise to_http_error(exc)
    return review_to_dict(review)
