"""商品库存查询路由"""

from fastapi import APIRouter, Depends, HTTPException, Path
import logging

from app.core.dependencies import get_stock_service
from app.services.stock_service import StockService
from app.schemas.stock import StockResponse

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/products",
    tags=["商品库存"],
)


@router.get(
    "/{product_id}/stock",
    response_model=StockResponse,
    summary="查询商品库存",
    description="""查询商品可用库存，优先读 Redis 缓存，未命中查库并缓存。
    下单、取消订单后相关商品的缓存会被清除。""",
)
def get_stock(
    product_id: int = Path(..., gt=0, description="商品ID", examples=[1]),
    service: StockService = Depends(get_stock_service),
):
    try:
        stock = service.get_product_stock(product_id)
        return {
            "success": True,
            "product_id": product_id,
            "available_stock": stock
        }
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"查询库存失败: {str(e)}")
        raise HTTPException(status_code=500, detail="查询库存失败")
