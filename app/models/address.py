from sqlalchemy import Column, BigInteger, String, Boolean, false

from app.db.base import Base, BigIntId


class Address(Base):
    """用户收货地址（由用户服务维护，下单时只读取并做快照）"""

    __tablename__ = "addresses"

    id = Column(BigIntId, primary_key=True, autoincrement=True)

    user_id = Column(
        BigInteger,
        nullable=False,
        index=True,
        comment="地址所属用户",
    )

    full_name = Column(String(255), nullable=False)
    street = Column(String(255), nullable=False)
    city = Column(String(100), nullable=False)
    state = Column(String(100), nullable=False)
    pincode = Column(String(20), nullable=False)
    is_default = Column(Boolean, nullable=False, server_default=false())

    def to_snapshot(self) -> dict:
        """生成嵌入订单的地址快照，之后地址变更不影响历史订单"""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "full_name": self.full_name,
            "street": self.street,
            "city": self.city,
            "state": self.state,
            "pincode": self.pincode,
        }
