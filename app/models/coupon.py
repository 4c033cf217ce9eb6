from sqlalchemy import (
    Column,
    BigInteger,
    String,
    Integer,
    Boolean,
    ForeignKey,
    CheckConstraint,
    TIMESTAMP,
    func,
    true,
)
from app.db.base import Base, BigIntId


class Coupon(Base):
    __tablename__ = "coupons"

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
        comment="发券的手工艺人",
    )

    code = Column(
        String(50),
        nullable=False,
        unique=True,
        comment="优惠码（大写存储）",
    )

    discount_percentage = Column(
        Integer,
        nullable=False,
        comment="折扣百分比",
    )

    max_uses = Column(
        Integer,
        nullable=False,
        server_default="100",
        comment="最大使用次数",
    )

    current_uses = Column(
        Integer,
        nullable=False,
        server_default="0",
        comment="已使用次数（只增不减）",
    )

    expiry_date = Column(
        TIMESTAMP(timezone=True),
        nullable=True,
        comment="过期时间，为空表示永不过期",
    )

    is_active = Column(
        Boolean,
        nullable=False,
        server_default=true(),
    )

    created_at = Column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint(
            "discount_percentage > 0 AND discount_percentage <= 100",
            name="ck_coupons_discount_range",
        ),
        CheckConstraint(
            "current_uses <= max_uses",
            name="ck_coupons_uses_within_cap",
        ),
    )
