from sqlalchemy import Column, Integer, String, Float, CheckConstraint, Index

from models.base_model import BaseModel, Base


class Product(BaseModel, Base):
    __tablename__ = "products"

    name = Column(String(255), nullable=False)
    price = Column(Float, nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    # Plain indexed reference, not a ForeignKey: listings must tolerate a
    # category_id that points at no category (joined fields come back null).
    category_id = Column(Integer, nullable=False)

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_products_price_nonnegative"),
        CheckConstraint("stock >= 0", name="ck_products_stock_nonnegative"),
        Index("ix_products_category_id", "category_id"),
        Index("ix_products_created_at", "created_at"),
    )
