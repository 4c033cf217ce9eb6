import enum

from sqlalchemy import (
    Column,
    BigInteger,
    String,
    Integer,
    TIMESTAMP,
    func,
    Enum,
    Index,
)
from app.db.base import Base, BigIntId

# 1定义库存变更类型（数据库 ENUM）
class StockChangeType(str, enum.Enum):
    ORDER_DEDUCT = "ORDER_DEDUCT"     # 下单扣减
    ORDER_RESTORE = "ORDER_RESTORE"   # 取消订单归还
# 2️库存流水表
class StockLog(Base):
    __tablename__ = "stock_logs"

    id = Column(
        BigIntId,
        primary_key=True,
        autoincrement=True,
    )

    product_id = Column(
        BigInteger,
        nullable=False,
        index=True,
        comment="商品ID",
    )

    order_id = Column(
        BigInteger,
        nullable=True,
        index=True,
        comment="订单ID",
    )

    change_type = Column(
        Enum(
            StockChangeType,
            name="stock_change_type",  # PostgreSQL ENUM 类型名
            create_type=True,
        ),
        nullable=False,
        comment="库存变更类型",
    )

    quantity = Column(
        Integer,
        nullable=False,
        comment="变更数量（扣减为负）",
    )

    before_stock = Column(
        Integer,
        nullable=False,
        comment="变更前库存",
    )

    after_stock = Column(
        Integer,
        nullable=False,
        comment="变更后库存",
    )

    created_at = Column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    operator = Column(
        String(64),
        nullable=True,
        comment="操作人（user_<id>）",
    )

    source = Column(
        String(50),
        nullable=True,
        comment="来源：order_service / order_cancel / artisan_update",
    )

# 3️组合索引（高频查询优化）


Index(
    "idx_stock_logs_product_created_desc",
    StockLog.product_id,
    StockLog.created_at.desc(),
)
