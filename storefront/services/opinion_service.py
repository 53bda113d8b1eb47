from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..model import Opinion, Product


class DuplicateOpinion(Exception):
    pass


def add_opinion(client_id: int, product_id, text, grade) -> Opinion | None:
    try:
        grade = int(grade)
        product_id = int(product_id)
    except (TypeError, ValueError):
        raise ValueError("productId and grade must be integers")
    if not 1 <= grade <= 5:
        raise ValueError("grade must be between 1 and 5")

    if db.session.get(Product, product_id) is None:
        return None
    if db.session.get(Opinion, (product_id, client_id)) is not None:
        raise DuplicateOpinion(product_id)

    op = Opinion(product_id=product_id, client_id=client_id, opinion=(text or "").strip(), grade=grade)
    db.session.add(op)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise DuplicateOpinion(product_id)
    return op


def opinions_for(product_id: int):
    return Opinion.query.filter_by(product_id=product_id).order_by(Opinion.client_id.asc()).all()


def product_grade(product_id: int) -> dict:
    avg, count = (db.session.query(func.avg(Opinion.grade), func.count(Opinion.grade))
                  .filter(Opinion.product_id == product_id)
                  .one())
    return {
        "product_id": product_id,
        "grade": round(float(avg), 2) if avg is not None else None,
        "count": int(count or 0),
    }
