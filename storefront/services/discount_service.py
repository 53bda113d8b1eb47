# storefront/services/discount_service.py
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..model import DiscountCode


class DuplicateCode(Exception):
    pass


def find_code(code: str | None) -> DiscountCode | None:
    code = (code or "").strip()
    if not code:
        return None
    return db.session.get(DiscountCode, code)


def list_codes():
    return DiscountCode.query.order_by(DiscountCode.code.asc()).all()


def create_code(code, discount_percent, admin_id: int | None) -> DiscountCode:
    code = (code or "").strip()
    if not code:
        raise ValueError("code is required")
    try:
        pct = int(discount_percent)
    except (TypeError, ValueError):
        raise ValueError("discount_percent must be an integer")
    if not 0 < pct <= 100:
        raise ValueError("discount_percent must be > 0 and <= 100")

    # unique case-insensitive
    if DiscountCode.query.filter(func.lower(DiscountCode.code) == code.lower()).first():
        raise DuplicateCode(code)

    c = DiscountCode(code=code, discount_percent=pct, admin_id=admin_id)
    db.session.add(c)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise DuplicateCode(code)
    return c
