"""业务异常定义

所有业务异常都继承 HTTPException，服务层直接抛出，
由 app.main 中的全局异常处理器统一转换为 {"success": False, "message": ...}。
"""

from fastapi import HTTPException, status


class ServiceError(HTTPException):
    """业务异常基类，子类声明状态码和默认提示"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "服务器内部错误"

    def __init__(self, detail: str = None):
        super().__init__(status_code=self.status_code, detail=detail or self.message)


# ==================== 下单 ====================

class AddressNotFound(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "收货地址不存在"


class CouponInvalid(ServiceError):
    """优惠券不存在、未启用、已过期或已用完（不做区分）"""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "优惠券无效或已失效"


class InsufficientStock(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    message = "库存不足"

    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(f"商品 {product_id} 库存不足")


class OrderPlacementFailed(ServiceError):
    message = "下单失败"


# ==================== 订单生命周期 ====================

class OrderNotFound(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "订单不存在"


class InvalidStatusTransition(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    message = "订单状态不允许此操作"


class OrderUpdateFailed(ServiceError):
    message = "订单更新失败"


# ==================== 优惠券管理 ====================

class NotAnArtisan(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "当前用户不是手工艺人"


class CouponCodeExists(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "优惠码已存在"


class CouponNotFound(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "优惠码无效或已过期"


class CouponExhausted(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "优惠券使用次数已达上限"
