from sqlalchemy import (
    Column,
    BigInteger,
    String,
    Integer,
    Numeric,
    ForeignKey,
    CheckConstraint,
    TIMESTAMP,
    func,
    Index,
)
from app.db.base import Base, BigIntId


class Product(Base):
    __tablename__ = "products"

    id = Column(
        BigIntId,
        primary_key=True,
        autoincrement=True,
    )

    artisan_id = Column(
        BigInteger,
        ForeignKey("artisans.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="所属手工艺人",
    )

    title = Column(
        String(255),
        nullable=False,
        comment="商品名称",
    )

    base_price = Column(
        Numeric(10, 2),
        nullable=False,
        comment="标价（MRP）",
    )

    sale_price = Column(
        Numeric(10, 2),
        nullable=True,
        comment="折扣价，为空时按标价售卖",
    )

    stock_qty = Column(
        Integer,
        nullable=False,
        server_default="0",
        comment="当前可售库存",
    )

    created_at = Column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at = Column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        nullable=False,
        onupdate=func.now(),
    )

    __table_args__ = (
        CheckConstraint(
            "stock_qty >= 0",
            name="ck_products_stock_non_negative",
        ),
    )


Index(
    "idx_products_title",
    Product.title,
)
