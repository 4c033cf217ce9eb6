"""优惠券服务实现"""

from datetime import datetime, timezone
from typing import List
import logging

from sqlalchemy import select, update, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import (
    CouponInvalid,
    CouponCodeExists,
    CouponNotFound,
    CouponExhausted,
)
from app.core.security import CurrentUser
from app.models.coupon import Coupon
from app.schemas.coupon import CreateCouponRequest
from app.services.artisans import get_artisan_for_user

logger = logging.getLogger(__name__)


class CouponService:
    """优惠券服务类"""

    def __init__(self, db: Session):
        self.db = db

    def redeem(self, code: str, now: datetime = None) -> int:
        """核销一次优惠券，返回折扣百分比

        判定与自增在同一条 UPDATE 里完成（compare-and-increment），
        并发核销同一张券时不会超过 max_uses。不提交事务。
        """
        now = now or datetime.now(timezone.utc)
        discount = self.db.execute(
            update(Coupon)
            .where(
                Coupon.code == code,
                Coupon.is_active.is_(True),
                or_(Coupon.expiry_date.is_(None), Coupon.expiry_date > now),
                Coupon.current_uses < Coupon.max_uses,
            )
            .values(current_uses=Coupon.current_uses + 1)
            .returning(Coupon.discount_percentage)
            .execution_options(synchronize_session=False)
        ).scalar_one_or_none()

        if discount is None:
            raise CouponInvalid()

        logger.info(f"优惠券核销成功: code={code}, discount={discount}%")
        return discount

    def create_coupon(self, user: CurrentUser, request: CreateCouponRequest) -> Coupon:
        """手工艺人创建优惠券"""
        artisan = get_artisan_for_user(self.db, user)
        coupon = Coupon(
            artisan_id=artisan.id,
            code=request.code,
            discount_percentage=request.discount_percentage,
            max_uses=request.max_uses,
            current_uses=0,
            expiry_date=request.expiry_date,
            is_active=True,
        )
        try:
            self.db.add(coupon)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"优惠码重复: code={request.code}, error={e.orig}")
            raise CouponCodeExists()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(coupon)
        logger.info(f"创建优惠券成功: code={coupon.code}, artisan_id={artisan.id}")
        return coupon

    def list_artisan_coupons(self, user: CurrentUser) -> List[Coupon]:
        """查询手工艺人的全部优惠券（新建在前）"""
        artisan = get_artisan_for_user(self.db, user)
        return self.db.execute(
            select(Coupon)
            .where(Coupon.artisan_id == artisan.id)
            .order_by(Coupon.created_at.desc(), Coupon.id.desc())
            .execution_options(populate_existing=True)
        ).scalars().all()

    def validate_coupon(self, code: str, now: datetime = None) -> Coupon:
        """下单前校验优惠码（只读，结果仅供参考，以下单时核销为准）"""
        now = now or datetime.now(timezone.utc)
        coupon = self.db.execute(
            select(Coupon).where(
                Coupon.code == code,
                Coupon.is_active.is_(True),
                or_(Coupon.expiry_date.is_(None), Coupon.expiry_date > now),
            )
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

        if coupon is None:
            raise CouponNotFound()
        if coupon.current_uses >= coupon.max_uses:
            raise CouponExhausted()
        return coupon
