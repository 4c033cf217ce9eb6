"""订单结算服务实现

下单是唯一需要强一致的写路径：地址快照、优惠券核销、订单/明细写入、库存扣减
在同一个数据库事务里完成，任一步失败整体回滚。
"""

from collections import OrderedDict
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional
import logging

from fastapi import HTTPException
from redis import Redis
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from app.core.exceptions import (
    AddressNotFound,
    OrderPlacementFailed,
    OrderNotFound,
    InvalidStatusTransition,
    OrderUpdateFailed,
)
from app.core.security import CurrentUser
from app.models.address import Address
from app.models.order import Order, OrderItem, OrderStatus
from app.models.product import Product
from app.schemas.order import CartItem, PlaceOrderRequest
from app.services.artisans import get_artisan_for_user
from app.services.coupon_service import CouponService
from app.services.stock_service import StockService

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

# 允许的状态流转；DELIVERED / CANCELLED 为终态
ALLOWED_TRANSITIONS: Dict[OrderStatus, frozenset] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PAID, OrderStatus.CANCELLED}),
    OrderStatus.PAID: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


def merge_cart_items(items: List[CartItem]) -> List[CartItem]:
    """同一商品的多行合并为一行（数量相加），保持首次出现的顺序"""
    merged: "OrderedDict[int, CartItem]" = OrderedDict()
    for item in items:
        if item.id in merged:
            prev = merged[item.id]
            merged[item.id] = prev.model_copy(update={"qty": prev.qty + item.qty})
        else:
            merged[item.id] = item
    return list(merged.values())


def calculate_discount(subtotal: Decimal, percentage: int) -> Decimal:
    """按百分比计算优惠金额，四舍五入到分"""
    if not percentage:
        return ZERO
    return (subtotal * Decimal(percentage) / Decimal(100)).quantize(CENT, rounding=ROUND_HALF_UP)


class OrderService:
    """订单核心服务类"""

    def __init__(self, db: Session, redis: Redis = None):
        self.db = db
        self.redis = redis
        self.stock = StockService(db, redis)
        self.coupons = CouponService(db)

    def place_order(self, user: CurrentUser, request: PlaceOrderRequest, now: datetime = None) -> Order:
        """下单（原子结算）

        1. 解析收货地址并校验归属
        2. 核销优惠券（单条条件 UPDATE）
        3. 写入订单，地址以快照形式嵌入
        4. 逐行条件扣减库存，按服务端价格写入明细
        5. 提交后失效库存缓存

        客户端传入的单价和 total_amount 只用于比对，不参与计算。
        不做幂等：重复提交会产生两笔订单。
        """
        now = now or datetime.now(timezone.utc)
        items = merge_cart_items(request.items)
        touched: List[int] = []

        try:
            address = self.db.get(Address, request.address_id)
            if address is None or address.user_id != user.id:
                raise AddressNotFound()

            discount_pct = 0
            if request.coupon_code:
                discount_pct = self.coupons.redeem(request.coupon_code, now)

            order = Order(
                user_id=user.id,
                subtotal_amount=ZERO,
                discount_amount=ZERO,
                total_amount=ZERO,
                coupon_code=request.coupon_code,
                payment_mode=request.payment_mode.value,
                status=OrderStatus.PAID,
                shipping_address=address.to_snapshot(),
            )
            self.db.add(order)
            self.db.flush()

            subtotal = ZERO
            for item in items:
                deducted = self.stock.deduct(
                    item.id,
                    item.qty,
                    order_id=order.id,
                    operator=f"user_{user.id}",
                )
                order.items.append(OrderItem(
                    product_id=item.id,
                    product_title=deducted.title,
                    quantity=item.qty,
                    price_at_purchase=deducted.unit_price,
                ))
                touched.append(item.id)
                subtotal += deducted.unit_price * item.qty

            discount = calculate_discount(subtotal, discount_pct)
            order.subtotal_amount = subtotal.quantize(CENT)
            order.discount_amount = discount
            order.total_amount = (subtotal - discount).quantize(CENT)

            if request.total_amount is not None and request.total_amount.quantize(CENT) != order.total_amount:
                logger.warning(
                    f"客户端金额与服务端不一致，以服务端为准: user_id={user.id}, "
                    f"client={request.total_amount}, server={order.total_amount}"
                )

            self.db.commit()

        except HTTPException as e:
            self.db.rollback()
            logger.warning(f"下单被拒绝: user_id={user.id}, reason={e.detail}")
            raise
        except Exception as e:
            self.db.rollback()
            logger.error(f"下单失败: user_id={user.id}, error={str(e)}", exc_info=True)
            raise OrderPlacementFailed() from e

        self.stock.invalidate(touched)
        logger.info(
            f"下单成功: order_id={order.id}, user_id={user.id}, "
            f"items={len(items)}, total={order.total_amount}"
        )
        return order

    def get_order_history(self, user: CurrentUser) -> List[Order]:
        """查询用户历史订单（含明细，新订单在前）"""
        return self.db.execute(
            select(Order)
            .where(Order.user_id == user.id)
            .options(selectinload(Order.items))
            .order_by(Order.created_at.desc(), Order.id.desc())
        ).scalars().all()

    def cancel_order(self, user: CurrentUser, order_id: int, now: datetime = None) -> Order:
        """顾客取消订单，归还库存（优惠券次数不退还）"""
        try:
            order = self._lock_order(order_id)
            if order is None or order.user_id != user.id:
                raise OrderNotFound()

            touched = self._transition(order, OrderStatus.CANCELLED, user, now=now)
            self.db.commit()
        except HTTPException:
            self.db.rollback()
            raise
        except Exception as e:
            self.db.rollback()
            logger.error(f"取消订单失败: order_id={order_id}, error={str(e)}", exc_info=True)
            raise OrderUpdateFailed() from e

        self.stock.invalidate(touched)
        logger.info(f"订单已取消: order_id={order_id}, user_id={user.id}")
        return order

    def update_order_status(self, user: CurrentUser, order_id: int, new_status: OrderStatus,
                            tracking_number: Optional[str] = None, now: datetime = None) -> Order:
        """手工艺人推进订单状态（发货 / 签收 / 取消）"""
        try:
            artisan = get_artisan_for_user(self.db, user)
            order = self._lock_order(order_id)
            if order is None or not self._sells_in_order(artisan.id, order.id):
                raise OrderNotFound()

            touched = self._transition(order, new_status, user, tracking_number=tracking_number, now=now)
            self.db.commit()
        except HTTPException:
            self.db.rollback()
            raise
        except Exception as e:
            self.db.rollback()
            logger.error(f"更新订单状态失败: order_id={order_id}, error={str(e)}", exc_info=True)
            raise OrderUpdateFailed() from e

        self.stock.invalidate(touched)
        logger.info(f"订单状态更新: order_id={order_id}, status={new_status.value}, artisan_user={user.id}")
        return order

    def _lock_order(self, order_id: int) -> Optional[Order]:
        return self.db.execute(
            select(Order)
            .where(Order.id == order_id)
            .options(selectinload(Order.items))
            .with_for_update()
        ).scalar_one_or_none()

    def _sells_in_order(self, artisan_id: int, order_id: int) -> bool:
        hit = self.db.execute(
            select(OrderItem.id)
            .join(Product, Product.id == OrderItem.product_id)
            .where(OrderItem.order_id == order_id, Product.artisan_id == artisan_id)
            .limit(1)
        ).scalar_one_or_none()
        return hit is not None

    def _transition(self, order: Order, new_status: OrderStatus, user: CurrentUser,
                    tracking_number: Optional[str] = None, now: datetime = None) -> List[int]:
        """执行状态流转，返回库存有变动的商品ID"""
        now = now or datetime.now(timezone.utc)
        current = OrderStatus(order.status)
        if new_status not in ALLOWED_TRANSITIONS[current]:
            raise InvalidStatusTransition(f"订单状态不能从 {current.value} 变更为 {new_status.value}")

        touched: List[int] = []
        if new_status == OrderStatus.SHIPPED:
            if not tracking_number:
                raise InvalidStatusTransition("发货必须填写物流单号")
            order.tracking_number = tracking_number
            order.shipped_at = now
        elif new_status == OrderStatus.DELIVERED:
            order.delivered_at = now
        elif new_status == OrderStatus.CANCELLED:
            for item in order.items:
                if item.product_id is None:
                    continue
                restored = self.stock.restore(
                    item.product_id,
                    item.quantity,
                    order_id=order.id,
                    operator=f"user_{user.id}",
                )
                if restored is not None:
                    touched.append(item.product_id)
            order.cancelled_at = now

        order.status = new_status
        return touched
