# app/schemas/order.py
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import List, Optional
from decimal import Decimal
from datetime import datetime
from enum import Enum

from app.models.order import OrderStatus
from app.schemas.base import BaseResponse


class PaymentMode(str, Enum):
    """支付方式枚举"""
    UPI = "UPI"
    CARD = "Credit/Debit Card"
    NETBANKING = "Netbanking"
    COD = "Cash on Delivery"


# ==================== 请求模型 ====================

class CartItem(BaseModel):
    """购物车行。价格仅作展示参考，服务端按商品库重新计算"""
    id: int = Field(..., gt=0, description="商品ID", examples=[1])
    qty: int = Field(..., gt=0, description="购买数量", examples=[2])
    base_price: Optional[Decimal] = Field(None, ge=0, description="客户端看到的标价")
    sale_price: Optional[Decimal] = Field(None, ge=0, description="客户端看到的折扣价")


class PlaceOrderRequest(BaseModel):
    """下单请求"""
    items: List[CartItem] = Field(
        ...,
        min_length=1,
        description="购物车商品"
    )
    address_id: int = Field(
        ...,
        gt=0,
        description="收货地址ID",
        examples=[1]
    )
    payment_mode: PaymentMode = Field(
        ...,
        description="支付方式",
        examples=["UPI"]
    )
    total_amount: Optional[Decimal] = Field(
        None,
        ge=0,
        description="客户端计算的应付金额（仅用于比对）"
    )
    coupon_code: Optional[str] = Field(
        None,
        max_length=50,
        description="优惠码",
        examples=["SAVE10"]
    )

    @field_validator("coupon_code")
    @classmethod
    def normalize_coupon_code(cls, v):
        if v is None:
            return None
        v = v.strip().upper()
        return v or None


class UpdateOrderStatusRequest(BaseModel):
    """手工艺人更新订单状态请求"""
    status: OrderStatus = Field(..., description="目标状态")
    tracking_number: Optional[str] = Field(
        None,
        min_length=1,
        max_length=100,
        description="物流单号（发货时必填）"
    )

    @model_validator(mode="after")
    def shipped_requires_tracking(self):
        if self.status == OrderStatus.SHIPPED and not self.tracking_number:
            raise ValueError("发货必须填写物流单号")
        return self


# ==================== 响应模型 ====================

class OrderItemSchema(BaseModel):
    id: int
    product_id: Optional[int]
    product_title: Optional[str]
    quantity: int
    price_at_purchase: Decimal

    class Config:
        from_attributes = True


class OrderSchema(BaseModel):
    id: int
    user_id: int
    subtotal_amount: Decimal
    discount_amount: Decimal
    total_amount: Decimal
    coupon_code: Optional[str]
    payment_mode: str
    status: OrderStatus
    shipping_address: dict
    tracking_number: Optional[str]
    shipped_at: Optional[datetime]
    delivered_at: Optional[datetime]
    cancelled_at: Optional[datetime]
    created_at: Optional[datetime]
    items: List[OrderItemSchema] = []

    class Config:
        from_attributes = True


class PlaceOrderResponse(BaseResponse):
    """下单响应"""
    orderId: int = Field(..., description="订单ID")
    totalAmount: Decimal = Field(..., description="服务端计算的实付金额")
