"""依赖注入配置模块"""

import logging
from typing import Generator, Optional

from fastapi import Depends
from redis import Redis
from sqlalchemy.orm import Session

# 数据库会话依赖
from app.db.session import SessionLocal

# Redis 依赖
from app.core.redis import redis_client

from app.services.stock_service import StockService
from app.services.coupon_service import CouponService
from app.services.order_service import OrderService

logger = logging.getLogger(__name__)


def get_redis() -> Optional[Redis]:
    """获取同步 Redis 客户端，不可用时返回 None（无缓存运行）"""
    try:
        redis_client.ping()
        return redis_client
    except Exception as e:
        logger.warning(f"Redis unavailable, running without cache: {e}")
        return None

def get_db() -> Generator[Session, None, None]:
    """获取数据库会话"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_stock_service(
    db: Session = Depends(get_db),
    redis = Depends(get_redis),
) -> StockService:
    """获取库存服务实例"""
    return StockService(db=db, redis=redis)


def get_coupon_service(db: Session = Depends(get_db)) -> CouponService:
    """获取优惠券服务实例"""
    return CouponService(db=db)


def get_order_service(
    db: Session = Depends(get_db),
    redis = Depends(get_redis),
) -> OrderService:
    """获取订单服务实例（依赖注入）"""
    return OrderService(db=db, redis=redis)
