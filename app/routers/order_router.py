"""订单 API 路由"""

from fastapi import APIRouter, Depends, HTTPException, Path, Body, status
from typing import List
import logging

from app.core.dependencies import get_order_service
from app.core.security import CurrentUser, CustomerDep, ArtisanDep
from app.services.order_service import OrderService
from app.schemas.order import (
    PlaceOrderRequest,
    PlaceOrderResponse,
    UpdateOrderStatusRequest,
    OrderSchema,
)

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/orders",
    tags=["订单"],
    responses={
        401: {"description": "令牌无效"},
        403: {"description": "无权限"},
        422: {"description": "请求验证失败"},
        500: {"description": "服务器内部错误"}
    }
)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=PlaceOrderResponse,
    summary="下单",
    description="""原子结算：地址快照、优惠券核销、订单写入、库存扣减在同一事务内完成。

    **错误码：**
    - 404 收货地址不存在
    - 400 优惠券无效（不存在 / 未启用 / 已过期 / 已用完）
    - 409 库存不足
    - 500 下单失败（已整体回滚）

    **注意：** 接口不幂等，重复提交会产生多笔订单。
    """,
    responses={
        201: {
            "description": "下单成功",
            "content": {
                "application/json": {
                    "example": {
                        "success": True,
                        "message": "下单成功",
                        "orderId": 42,
                        "totalAmount": "225.00"
                    }
                }
            }
        },
        400: {"description": "优惠券无效"},
        404: {"description": "收货地址不存在"},
        409: {"description": "库存不足"},
    }
)
def place_order(
    request: PlaceOrderRequest = Body(..., description="下单请求"),
    user: CurrentUser = CustomerDep,
    service: OrderService = Depends(get_order_service),
):
    """下单（结算核心接口）"""
    try:
        order = service.place_order(user, request)
        return {
            "success": True,
            "message": "下单成功",
            "orderId": order.id,
            "totalAmount": order.total_amount,
        }
    except HTTPException:
        # 透传 HTTPException
        raise
    except Exception as e:
        logger.error(f"下单失败: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="下单失败")


@router.get(
    "",
    response_model=List[OrderSchema],
    summary="历史订单",
)
def get_order_history(
    user: CurrentUser = CustomerDep,
    service: OrderService = Depends(get_order_service),
):
    """查询当前顾客的全部订单（含明细）"""
    try:
        return service.get_order_history(user)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"查询订单失败: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="查询订单失败")


@router.post(
    "/{order_id}/cancel",
    response_model=OrderSchema,
    summary="取消订单",
    description="""顾客取消待支付或已支付的订单，库存归还，优惠券次数不退还。""",
)
def cancel_order(
    order_id: int = Path(..., gt=0, description="订单ID"),
    user: CurrentUser = CustomerDep,
    service: OrderService = Depends(get_order_service),
):
    try:
        return service.cancel_order(user, order_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"取消订单失败: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="取消订单失败")


@router.patch(
    "/{order_id}/status",
    response_model=OrderSchema,
    summary="更新订单状态",
    description="""手工艺人推进订单：PAID → SHIPPED（需物流单号）→ DELIVERED，或取消。""",
)
def update_order_status(
    order_id: int = Path(..., gt=0, description="订单ID"),
    request: UpdateOrderStatusRequest = Body(...),
    user: CurrentUser = ArtisanDep,
    service: OrderService = Depends(get_order_service),
):
    try:
        return service.update_order_status(
            user,
            order_id,
            request.status,
            tracking_number=request.tracking_number,
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"更新订单状态失败: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="更新订单状态失败")
