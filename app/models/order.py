import enum

from sqlalchemy import (
    Column,
    BigInteger,
    String,
    Integer,
    Numeric,
    TIMESTAMP,
    ForeignKey,
    CheckConstraint,
    JSON,
    func,
    Enum,
    Index,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from app.db.base import Base, BigIntId



# 1️ 订单状态枚举（数据库 ENUM）

class OrderStatus(str, enum.Enum):
    PENDING = "PENDING"       # 待支付
    PAID = "PAID"             # 已支付
    SHIPPED = "SHIPPED"       # 已发货
    DELIVERED = "DELIVERED"   # 已签收
    CANCELLED = "CANCELLED"   # 已取消



# 2️ 订单表

class Order(Base):
    __tablename__ = "orders"

    id = Column(
        BigIntId,
        primary_key=True,
        autoincrement=True,
    )

    user_id = Column(
        BigInteger,
        nullable=False,
        index=True,
        comment="下单用户ID",
    )

    subtotal_amount = Column(
        Numeric(10, 2),
        nullable=False,
        comment="商品小计（服务端计算）",
    )

    discount_amount = Column(
        Numeric(10, 2),
        nullable=False,
        server_default="0",
        comment="优惠金额",
    )

    total_amount = Column(
        Numeric(10, 2),
        nullable=False,
        comment="实付金额",
    )

    coupon_code = Column(
        String(50),
        nullable=True,
        comment="使用的优惠码",
    )

    payment_mode = Column(
        String(20),
        nullable=False,
        comment="支付方式",
    )

    status = Column(
        Enum(
            OrderStatus,
            name="order_status_type",
            create_type=True,
        ),
        nullable=False,
        server_default=OrderStatus.PENDING.value,
        comment="订单状态",
    )

    # 下单时的地址快照，不是外键引用
    shipping_address = Column(
        JSON().with_variant(JSONB, "postgresql"),
        nullable=False,
        comment="收货地址快照",
    )

    tracking_number = Column(
        String(100),
        nullable=True,
        comment="物流单号",
    )

    shipped_at = Column(TIMESTAMP(timezone=True), nullable=True)
    delivered_at = Column(TIMESTAMP(timezone=True), nullable=True)
    cancelled_at = Column(TIMESTAMP(timezone=True), nullable=True)

    created_at = Column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at = Column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )



# 3️ 订单明细表

class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(
        BigIntId,
        primary_key=True,
        autoincrement=True,
    )

    order_id = Column(
        BigInteger,
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="订单ID",
    )

    # 商品可能被删除，仅作信息参考
    product_id = Column(
        BigInteger,
        ForeignKey("products.id", ondelete="SET NULL"),
        nullable=True,
        comment="商品ID",
    )

    product_title = Column(
        String(255),
        nullable=True,
        comment="下单时的商品名称快照",
    )

    quantity = Column(
        Integer,
        nullable=False,
        comment="购买数量",
    )

    price_at_purchase = Column(
        Numeric(10, 2),
        nullable=False,
        comment="下单时的成交单价",
    )

    order = relationship("Order", back_populates="items")

    __table_args__ = (
        CheckConstraint(
            "quantity > 0",
            name="ck_order_items_quantity_positive",
        ),
    )



# 4️ 高频查询优化索引

Index(
    "idx_orders_user_created_desc",
    Order.user_id,
    Order.created_at.desc(),
)
