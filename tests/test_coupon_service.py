"""优惠券服务单元测试"""
import pytest
from datetime import timedelta

from app.core.exceptions import (
    CouponInvalid,
    CouponCodeExists,
    CouponNotFound,
    CouponExhausted,
    NotAnArtisan,
)
from app.core.security import CurrentUser
from app.models import Coupon
from app.schemas.coupon import CreateCouponRequest
from app.services.coupon_service import CouponService

from helpers import OTHER_ARTISAN_USER_ID, uses_of


class TestCouponService:
    """优惠券服务测试类"""

    def test_redeem_increments_uses(self, db_session, catalog):
        service = CouponService(db_session)

        assert service.redeem("SAVE10") == 10
        db_session.commit()
        assert uses_of(db_session, "SAVE10") == 1

    def test_redeem_exhausted(self, db_session, catalog):
        service = CouponService(db_session)
        service.redeem("SAVE10")
        db_session.commit()

        with pytest.raises(CouponInvalid):
            service.redeem("SAVE10")
        assert uses_of(db_session, "SAVE10") == 1

    def test_redeem_respects_clock(self, db_session, catalog):
        """过期判断使用传入的时间"""
        service = CouponService(db_session)

        assert service.redeem("OLDDEAL", now=catalog.now - timedelta(days=2)) == 20
        with pytest.raises(CouponInvalid):
            service.redeem("OLDDEAL", now=catalog.now)

    def test_create_coupon(self, db_session, catalog, artisan_user):
        request = CreateCouponRequest(code=" diwali25 ", discount_percentage=25, max_uses=50)
        coupon = CouponService(db_session).create_coupon(artisan_user, request)

        assert coupon.id is not None
        assert coupon.code == "DIWALI25"
        assert coupon.artisan_id == 1
        assert coupon.current_uses == 0
        assert coupon.is_active is True

    def test_create_coupon_default_max_uses(self, db_session, catalog, artisan_user):
        coupon = CouponService(db_session).create_coupon(
            artisan_user, CreateCouponRequest(code="HOLI", discount_percentage=5)
        )
        assert coupon.max_uses == 100

    def test_create_duplicate_code(self, db_session, catalog, artisan_user):
        with pytest.raises(CouponCodeExists) as exc_info:
            CouponService(db_session).create_coupon(
                artisan_user, CreateCouponRequest(code="save10", discount_percentage=5)
            )

        assert exc_info.value.status_code == 400
        # 会话回滚后仍可继续使用
        assert uses_of(db_session, "SAVE10") == 0

    def test_create_coupon_not_artisan(self, db_session, catalog, customer):
        with pytest.raises(NotAnArtisan):
            CouponService(db_session).create_coupon(
                customer, CreateCouponRequest(code="NEW", discount_percentage=5)
            )

    def test_list_artisan_coupons(self, db_session, catalog, artisan_user):
        coupons = CouponService(db_session).list_artisan_coupons(artisan_user)

        assert sorted(c.code for c in coupons) == ["OLDDEAL", "SAVE10"]

    def test_list_other_artisan_coupons(self, db_session, catalog):
        coupons = CouponService(db_session).list_artisan_coupons(
            CurrentUser(id=OTHER_ARTISAN_USER_ID, role="ARTISAN")
        )
        assert [c.code for c in coupons] == ["PAUSED"]

    def test_validate_coupon(self, db_session, catalog):
        coupon = CouponService(db_session).validate_coupon("SAVE10")

        assert coupon.discount_percentage == 10
        # 校验不消耗次数
        assert uses_of(db_session, "SAVE10") == 0

    @pytest.mark.parametrize("code", ["NOPE", "OLDDEAL", "PAUSED"])
    def test_validate_not_found_expired_or_inactive(self, db_session, catalog, code):
        with pytest.raises(CouponNotFound) as exc_info:
            CouponService(db_session).validate_coupon(code)

        assert exc_info.value.status_code == 404

    def test_validate_exhausted(self, db_session, catalog):
        db_session.add(Coupon(id=20, artisan_id=1, code="USEDUP", discount_percentage=5,
                              max_uses=2, current_uses=2, is_active=True))
        db_session.commit()

        with pytest.raises(CouponExhausted) as exc_info:
            CouponService(db_session).validate_coupon("USEDUP")

        assert exc_info.value.status_code == 400

    def test_validate_after_last_use_redeemed(self, db_session, catalog):
        service = CouponService(db_session)
        service.redeem("SAVE10")
        db_session.commit()

        with pytest.raises(CouponExhausted):
            service.validate_coupon("SAVE10")
