from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime


class CreateCouponRequest(BaseModel):
    """创建优惠券请求"""
    code: str = Field(..., min_length=1, max_length=50, examples=["SAVE10"])
    discount_percentage: int = Field(..., gt=0, le=100, description="折扣百分比")
    max_uses: int = Field(100, gt=0, description="最大使用次数")
    expiry_date: Optional[datetime] = Field(None, description="过期时间，为空永不过期")

    @field_validator("code")
    @classmethod
    def upper_code(cls, v):
        v = v.strip().upper()
        if not v:
            raise ValueError("优惠码不能为空")
        return v


class ValidateCouponRequest(BaseModel):
    code: str = Field(..., min_length=1, max_length=50)

    @field_validator("code")
    @classmethod
    def upper_code(cls, v):
        return v.strip().upper()


class CouponSchema(BaseModel):
    id: int
    artisan_id: int
    code: str
    discount_percentage: int
    max_uses: int
    current_uses: int
    expiry_date: Optional[datetime]
    is_active: bool
    created_at: Optional[datetime]

    class Config:
        from_attributes = True
