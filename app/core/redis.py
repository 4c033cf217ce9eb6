"""Redis 客户端配置模块"""

from redis import Redis
from redis.asyncio import Redis as AsyncRedis

from app.core.config import settings

REDIS_URL = settings.redis_url

# 同步客户端供服务层缓存使用，异步客户端用于启动时健康检查
redis_client = Redis.from_url(REDIS_URL, decode_responses=True)
async_redis = AsyncRedis.from_url(REDIS_URL, decode_responses=True)


def stock_cache_key(product_id: int) -> str:
    """商品可用库存的缓存键"""
    return f"stock:available:{product_id}"


# 导出
__all__ = [
    "redis_client",
    "async_redis",
    "stock_cache_key",
    "REDIS_URL"
]
