from .base import Base
from .session import engine


def init_db():
    """按模型定义建表（开发/测试环境使用）"""
    import app.models  # noqa: F401  注册全部模型

    Base.metadata.create_all(bind=engine)


# Export for convenience
__all__ = ["Base", "engine", "init_db"]
