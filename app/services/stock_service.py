"""库存服务实现"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional
import logging

from redis import Redis
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import InsufficientStock, OrderPlacementFailed
from app.core.redis import stock_cache_key
from app.models.product import Product
from app.models.stock_logs import StockLog, StockChangeType

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


@dataclass(frozen=True)
class DeductedStock:
    """扣减成功后商品的服务端快照"""
    product_id: int
    title: str
    unit_price: Decimal
    remaining: int


class StockService:
    """库存核心服务类

    扣减/归还只写入当前会话，不提交；事务边界由调用方（订单服务）控制，
    缓存失效必须在调用方提交之后再调用 invalidate。
    """

    def __init__(self, db: Session, redis: Redis = None):
        self.db = db
        self.redis = redis

    def get_product_stock(self, product_id: int) -> int:
        """查询商品可用库存（带缓存）"""
        cache_key = stock_cache_key(product_id)

        # 先查缓存
        if self.redis:
            cached = self.redis.get(cache_key)
            if cached is not None:
                logger.debug(f"Cache hit for product {product_id}")
                return int(cached)

        # 缓存未命中，查询数据库
        stock = self.db.execute(
            select(Product.stock_qty).where(Product.id == product_id)
        ).scalar_one_or_none()
        available = stock if stock is not None else 0

        if self.redis:
            self.redis.setex(cache_key, settings.STOCK_CACHE_TTL, available)
            logger.debug(f"Cache set for product {product_id}: {available}")

        return available

    def deduct(self, product_id: int, quantity: int, order_id: int = None, operator: str = None) -> DeductedStock:
        """条件扣减库存：只有 stock_qty >= quantity 时才扣减（单条 UPDATE）"""
        row = self.db.execute(
            update(Product)
            .where(Product.id == product_id, Product.stock_qty >= quantity)
            .values(stock_qty=Product.stock_qty - quantity)
            .returning(Product.stock_qty, Product.title, Product.base_price, Product.sale_price)
            .execution_options(synchronize_session=False)
        ).one_or_none()

        if row is None:
            exists = self.db.execute(
                select(Product.id).where(Product.id == product_id)
            ).scalar_one_or_none()
            if exists is None:
                raise OrderPlacementFailed(f"商品 {product_id} 不存在或已下架")
            raise InsufficientStock(product_id)

        price = row.sale_price if row.sale_price is not None else row.base_price

        self.db.add(StockLog(
            product_id=product_id,
            order_id=order_id,
            change_type=StockChangeType.ORDER_DEDUCT,
            quantity=-quantity,
            before_stock=row.stock_qty + quantity,
            after_stock=row.stock_qty,
            operator=operator,
            source="order_service",
        ))

        return DeductedStock(
            product_id=product_id,
            title=row.title,
            unit_price=Decimal(str(price)).quantize(CENT),
            remaining=row.stock_qty,
        )

    def restore(self, product_id: int, quantity: int, order_id: int = None,
                operator: str = None, source: str = "order_cancel") -> Optional[int]:
        """归还库存，商品已删除时跳过并返回 None"""
        after = self.db.execute(
            update(Product)
            .where(Product.id == product_id)
            .values(stock_qty=Product.stock_qty + quantity)
            .returning(Product.stock_qty)
            .execution_options(synchronize_session=False)
        ).scalar_one_or_none()

        if after is None:
            logger.info(f"商品已删除，跳过库存归还: product_id={product_id}, order_id={order_id}")
            return None

        self.db.add(StockLog(
            product_id=product_id,
            order_id=order_id,
            change_type=StockChangeType.ORDER_RESTORE,
            quantity=quantity,
            before_stock=after - quantity,
            after_stock=after,
            operator=operator,
            source=source,
        ))
        return after

    def invalidate(self, product_ids: Iterable[int]) -> None:
        """失效库存缓存（提交后调用）"""
        if not self.redis:
            return
        for product_id in set(product_ids):
            try:
                self.redis.delete(stock_cache_key(product_id))
                logger.debug(f"Cache invalidated for product {product_id}")
            except Exception as e:
                # 缓存过期后自愈，不影响已提交的事务
                logger.warning(f"Cache invalidation failed for product {product_id}: {e}")
