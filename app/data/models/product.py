from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, Numeric, Identity, CheckConstraint, DDL, event

from app.data.database import Base
from app.utils.settings import PRODUCT_ID_START


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Integer, Identity(start=PRODUCT_ID_START), primary_key=True)
    name = Column(String(255), nullable=False)

    price = Column(Numeric(18, 2), nullable=False)
    quantity = Column(Integer, nullable=False, default=0)
    stock_available = Column(Integer, nullable=False, default=0)
    added_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
        CheckConstraint("quantity >= 0", name="ck_products_quantity_non_negative"),
        CheckConstraint("stock_available >= 0", name="ck_products_stock_non_negative"),
        {"sqlite_autoincrement": True},
    )


#sqlite ignoruje Identity, wiec ustawiamy licznik AUTOINCREMENT recznie
event.listen(
    ProductModel.__table__,
    "after_create",
    DDL("DELETE FROM sqlite_sequence WHERE name = '%(table)s'").execute_if(dialect="sqlite"),
)
event.listen(
    ProductModel.__table__,
    "after_create",
    DDL(
        f"INSERT INTO sqlite_sequence (name, seq) VALUES ('%(table)s', {PRODUCT_ID_START - 1})"
    ).execute_if(dialect="sqlite"),
)
