"""Inventory store: the authoritative table of sweets and its atomic stock operations."""

import logging
from collections.abc import Sequence
from typing import NoReturn

from sqlalchemy import Update, delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sweetshop.core.errors import FieldError, InternalError, NotFound, ValidationError
from sweetshop.models import Sweet
from sweetshop.schemas.sweets import MAX_QUANTITY, SweetInput, SweetSearch

logger = logging.getLogger(__name__)


class InventoryStore:
    """
    Reads and writes sweets behind one SQLAlchemy session.

    purchase and restock are each a single UPDATE statement, so the database
    serializes concurrent calls on the same row; nothing here reads a
    quantity and writes it back. update and delete are last-writer-wins.
    Storage failures are rolled back, logged, and re-raised as InternalError.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, data: SweetInput) -> Sweet:
        sweet = Sweet(**data.model_dump())
        self.session.add(sweet)
        self._commit("create")
        logger.info("Created sweet id=%s name=%r quantity=%s", sweet.id, sweet.name, sweet.quantity)
        return sweet

    def get_all(self) -> Sequence[Sweet]:
        return self.session.scalars(select(Sweet).order_by(Sweet.id)).all()

    def search(self, search: SweetSearch) -> Sequence[Sweet]:
        """Case-insensitive name substring, exact category, inclusive price bounds; ANDed."""
        stmt = select(Sweet)
        if search.name:
            stmt = stmt.where(Sweet.name.icontains(search.name, autoescape=True))
        if search.category is not None:
            stmt = stmt.where(Sweet.category == search.category)
        if search.min_price is not None:
            stmt = stmt.where(Sweet.price >= search.min_price)
        if search.max_price is not None:
            stmt = stmt.where(Sweet.price <= search.max_price)
        return self.session.scalars(stmt.order_by(Sweet.id)).all()

    def get_by_id(self, sweet_id: int) -> Sweet | None:
        return self.session.get(Sweet, sweet_id)

    def update(self, sweet_id: int, data: SweetInput) -> Sweet:
        """Overwrite every field of an existing sweet. Raises NotFound."""
        sweet = self.get_by_id(sweet_id)
        if sweet is None:
            raise NotFound("Sweet not found")
        for field, value in data.model_dump().items():
            setattr(sweet, field, value)
        self._commit("update")
        logger.info("Updated sweet id=%s", sweet_id)
        return sweet

    def delete(self, sweet_id: int) -> bool:
        """Remove a sweet permanently. False (not an error) if it did not exist."""
        try:
            result = self.session.execute(delete(Sweet).where(Sweet.id == sweet_id))
            self.session.commit()
        except SQLAlchemyError as e:
            self._fail("delete", e)
        removed = result.rowcount > 0
        if removed:
            logger.info("Deleted sweet id=%s", sweet_id)
        return removed

    def purchase(self, sweet_id: int) -> Sweet | None:
        """
        Take one unit out of stock if any is left.

        Returns the updated sweet, or None if it does not exist or its
        quantity was already 0 when the statement ran.
        """
        stmt = (
            update(Sweet)
            .where(Sweet.id == sweet_id, Sweet.quantity > 0)
            .values(quantity=Sweet.quantity - 1)
        )
        sweet = self._apply_stock_change(stmt, sweet_id, "purchase")
        if sweet is not None:
            logger.info("Purchased sweet id=%s remaining=%s", sweet_id, sweet.quantity)
        return sweet

    def restock(self, sweet_id: int, amount: int) -> Sweet | None:
        """
        Add amount units to stock.

        Returns None if the sweet does not exist or the new quantity would
        exceed MAX_QUANTITY; the stored quantity is unchanged in both cases.
        """
        if amount < 1:
            raise ValidationError([FieldError(field="amount", message="Amount must be at least 1")])
        if amount > MAX_QUANTITY:
            raise ValidationError(
                [FieldError(field="amount", message=f"Amount must be at most {MAX_QUANTITY}")]
            )
        stmt = (
            update(Sweet)
            .where(Sweet.id == sweet_id, Sweet.quantity <= MAX_QUANTITY - amount)
            .values(quantity=Sweet.quantity + amount)
        )
        sweet = self._apply_stock_change(stmt, sweet_id, "restock")
        if sweet is not None:
            logger.info("Restocked sweet id=%s amount=%s quantity=%s", sweet_id, amount, sweet.quantity)
        return sweet

    def _apply_stock_change(self, stmt: Update, sweet_id: int, operation: str) -> Sweet | None:
        """Run one conditional UPDATE and re-read the row inside the same transaction."""
        try:
            result = self.session.execute(
                stmt.execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                self.session.rollback()
                return None
            sweet = self.session.get(Sweet, sweet_id, populate_existing=True)
            self.session.commit()
        except SQLAlchemyError as e:
            self._fail(operation, e)
        return sweet

    def _commit(self, operation: str) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self._fail(operation, e)

    def _fail(self, operation: str, error: SQLAlchemyError) -> NoReturn:
        self.session.rollback()
        logger.exception("Inventory %s failed", operation)
        raise InternalError(cause=error) from error
