from pydantic import Field

from app.schemas.base import BaseResponse


class StockResponse(BaseResponse):
    """单个商品库存响应"""
    product_id: int = Field(
        ...,
        description="商品ID"
    )
    available_stock: int = Field(
        ...,
        ge=0,
        description="可用库存数量"
    )
