"""ORM model for inventory items (sweets)."""

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, Numeric, String, func

from sweetshop.models.base import Base


class Sweet(Base):
    """
    One inventory line: a named item in a fixed category with a unit price
    and the quantity currently in stock.

    quantity never goes below zero; purchases decrement it through a
    conditional UPDATE in InventoryStore.purchase.
    """

    __tablename__ = "sweets"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="quantity_non_negative"),
        CheckConstraint("price > 0", name="price_positive"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, index=True)
    category = Column(String(32), nullable=False, index=True)
    price = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    quantity = Column(Integer, nullable=False, default=0)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
