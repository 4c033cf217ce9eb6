"""测试辅助函数"""
from datetime import datetime, timedelta, timezone

from jose import jwt
from sqlalchemy import select, func

from app.core.config import settings
from app.models import Coupon, Product

CUSTOMER_ID = 7
OTHER_CUSTOMER_ID = 8
ARTISAN_USER_ID = 100
OTHER_ARTISAN_USER_ID = 200


def make_token(user_id: int, role: str, expires_in: timedelta = timedelta(hours=1)) -> str:
    """签发测试用 JWT"""
    payload = {
        "id": user_id,
        "role": role,
        "exp": datetime.now(timezone.utc) + expires_in,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def auth_header(user_id: int, role: str) -> dict:
    return {"Authorization": f"Bearer {make_token(user_id, role)}"}


def stock_of(db, product_id: int) -> int:
    """直接查库存列，绕过会话缓存"""
    return db.execute(select(Product.stock_qty).where(Product.id == product_id)).scalar_one()


def uses_of(db, code: str) -> int:
    return db.execute(select(Coupon.current_uses).where(Coupon.code == code)).scalar_one()


def count_rows(db, model) -> int:
    return db.execute(select(func.count()).select_from(model)).scalar_one()
