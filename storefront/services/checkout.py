# storefront/services/checkout.py
"""
Cart -> order conversion.

``create_order`` runs in a single transaction on a connection taken from the
injected engine's pool:

  1) lock the client's cart rows (SELECT ... FOR UPDATE)
  2) insert the order row (server timestamp, status "packing")
  3) copy the locked cart rows into order_product
  4) delete exactly those cart rows

Any exception rolls the whole thing back. Lines are copied from the locked
snapshot, not re-read, so a row added to the cart mid-checkout is neither
ordered nor deleted. If the delete removes fewer rows than were locked, the
transaction is rolled back.

Two racing checkouts for one client end differently per backend. On
PostgreSQL the second waits on FOR UPDATE, then finds the cart empty and
commits an empty order. SQLite has no row locks: the second reads the same
snapshot, its delete comes up short, and it rolls back as TransactionFailure.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

from sqlalchemy import delete, insert, select
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from ..model import CartEntry, DiscountCode, Order, OrderProduct, INITIAL_STATUS

log = logging.getLogger(__name__)

_cart = CartEntry.__table__
_order = Order.__table__
_lines = OrderProduct.__table__
_codes = DiscountCode.__table__


# ---- result types ----------------------------------------------------------

@dataclass(frozen=True)
class TransactionFailure:
    """The database rejected the checkout; ``error`` is the original exception."""

    error: Exception

    @property
    def message(self) -> str:
        return f"checkout failed: {self.error}"


@dataclass(frozen=True)
class InvalidDiscountCode:
    code: str

    @property
    def message(self) -> str:
        return f"discount code '{self.code}' does not exist"


@dataclass(frozen=True)
class Ok:
    order_id: int

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    failure: Union[TransactionFailure, InvalidDiscountCode]

    @property
    def ok(self) -> bool:
        return False


CheckoutResult = Union[Ok, Err]


class _UnknownCode(Exception):
    # raised inside the transaction so the context manager rolls back
    def __init__(self, code: str):
        super().__init__(code)
        self.code = code


# ---- transaction steps -----------------------------------------------------

def _normalize_code(code: str | None) -> str | None:
    code = (code or "").strip()
    return code or None


def _lock_cart(conn: Connection, client_id: int) -> list[tuple[int, int]]:
    rows = conn.execute(
        select(_cart.c.product_id, _cart.c.amount)
        .where(_cart.c.client_id == client_id)
        .order_by(_cart.c.product_id)
        .with_for_update()
    ).all()
    return [(r.product_id, r.amount) for r in rows]


def _check_code(conn: Connection, code: str) -> None:
    found = conn.execute(select(_codes.c.code).where(_codes.c.code == code)).first()
    if found is None:
        raise _UnknownCode(code)


def _insert_order(conn: Connection, client_id: int, code: str | None, address, city) -> int:
    result = conn.execute(
        insert(_order).values(
            client_id=client_id,
            status=INITIAL_STATUS,
            discount_code=code,
            address=address,
            city=city,
        )
    )
    return result.inserted_primary_key[0]


def _insert_lines(conn: Connection, order_id: int, snapshot: list[tuple[int, int]]) -> None:
    if not snapshot:
        return
    conn.execute(
        insert(_lines),
        [{"order_id": order_id, "product_id": pid, "amount": amount} for pid, amount in snapshot],
    )


def _clear_cart(conn: Connection, client_id: int, product_ids: list[int]) -> int:
    if not product_ids:
        return 0
    result = conn.execute(
        delete(_cart)
        .where(_cart.c.client_id == client_id)
        .where(_cart.c.product_id.in_(product_ids))
    )
    return result.rowcount


# ---- public API ------------------------------------------------------------

def create_order(engine: Engine, client_id: int, discount_code: str | None,
                 address: str | None, city: str | None) -> CheckoutResult:
    """
    Turn the client's cart into an order and empty the cart, atomically.

    Returns ``Ok(order_id)`` on commit. On any failure nothing is written and
    ``Err`` carries either ``InvalidDiscountCode`` or ``TransactionFailure``
    wrapping the driver exception. An empty cart yields an order with no lines.
    """
    code = _normalize_code(discount_code)
    try:
        with engine.begin() as conn:
            snapshot = _lock_cart(conn, client_id)
            if code is not None:
                _check_code(conn, code)
            order_id = _insert_order(conn, client_id, code, address, city)
            _insert_lines(conn, order_id, snapshot)
            removed = _clear_cart(conn, client_id, [pid for pid, _ in snapshot])
            if removed != len(snapshot):
                raise SQLAlchemyError(
                    f"cart changed during checkout: expected {len(snapshot)} rows, deleted {removed}"
                )
    except _UnknownCode as e:
        log.info("checkout rejected for client %s: unknown discount code %r", client_id, e.code)
        return Err(InvalidDiscountCode(e.code))
    except SQLAlchemyError as e:
        log.warning("checkout rolled back for client %s: %s", client_id, e, exc_info=True)
        return Err(TransactionFailure(e))

    log.info("order %s created for client %s with %d line(s)", order_id, client_id, len(snapshot))
    return Ok(order_id)
