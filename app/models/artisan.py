from sqlalchemy import Column, BigInteger, String

from app.db.base import Base, BigIntId


class Artisan(Base):
    """手工艺人档案（由用户服务维护，这里只读）"""

    __tablename__ = "artisans"

    id = Column(BigIntId, primary_key=True, autoincrement=True)

    user_id = Column(
        BigInteger,
        nullable=False,
        unique=True,
        comment="对应的用户ID",
    )

    store_name = Column(String(255), nullable=True)
