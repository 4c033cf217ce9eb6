"""优惠券 API 路由"""

from fastapi import APIRouter, Depends, HTTPException, Body, status
from typing import List
import logging

from app.core.dependencies import get_coupon_service
from app.core.security import CurrentUser, ArtisanDep
from app.services.coupon_service import CouponService
from app.schemas.coupon import CreateCouponRequest, ValidateCouponRequest, CouponSchema

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/coupons",
    tags=["优惠券"],
)


@router.post(
    "/create",
    status_code=status.HTTP_201_CREATED,
    response_model=CouponSchema,
    summary="创建优惠券",
)
def create_coupon(
    request: CreateCouponRequest = Body(...),
    user: CurrentUser = ArtisanDep,
    service: CouponService = Depends(get_coupon_service),
):
    """手工艺人创建优惠券（优惠码统一转大写）"""
    try:
        return service.create_coupon(user, request)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"创建优惠券失败: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="创建优惠券失败")


@router.get(
    "/artisan/all",
    response_model=List[CouponSchema],
    summary="我的优惠券",
)
def get_artisan_coupons(
    user: CurrentUser = ArtisanDep,
    service: CouponService = Depends(get_coupon_service),
):
    try:
        return service.list_artisan_coupons(user)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"查询优惠券失败: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="查询优惠券失败")


@router.post(
    "/validate",
    response_model=CouponSchema,
    summary="校验优惠码",
    description="""下单前校验优惠码是否可用。结果仅供展示，实际以下单时的原子核销为准。""",
)
def validate_coupon(
    request: ValidateCouponRequest = Body(...),
    service: CouponService = Depends(get_coupon_service),
):
    try:
        return service.validate_coupon(request.code)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"校验优惠码失败: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="校验优惠码失败")
