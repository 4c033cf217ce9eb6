"""测试配置和 fixtures"""
import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import Mock
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from redis import Redis

import app.models  # noqa: F401  注册全部模型
from app.db.base import Base
from app.core.security import CurrentUser
from app.models import Address, Artisan, Coupon, Product

from helpers import CUSTOMER_ID, OTHER_CUSTOMER_ID, ARTISAN_USER_ID, OTHER_ARTISAN_USER_ID


@pytest.fixture
def engine():
    """内存 SQLite，所有会话共用同一连接"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture
def db_session(engine):
    """创建数据库会话"""
    SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def mock_redis():
    """创建模拟 Redis 客户端"""
    redis_mock = Mock(spec=Redis)
    redis_mock.get.return_value = None
    redis_mock.setex.return_value = True
    redis_mock.delete.return_value = 1
    return redis_mock


@pytest.fixture
def catalog(db_session):
    """示例数据：两位手工艺人、三件商品、两个地址、一张限用一次的优惠券"""
    now = datetime.now(timezone.utc)
    db_session.add_all([
        Artisan(id=1, user_id=ARTISAN_USER_ID, store_name="Kala Crafts"),
        Artisan(id=2, user_id=OTHER_ARTISAN_USER_ID, store_name="Loom House"),
    ])
    db_session.flush()
    db_session.add_all([
        Product(id=1, artisan_id=1, title="Terracotta Vase", base_price=Decimal("100.00"), stock_qty=10),
        Product(id=2, artisan_id=1, title="Madhubani Print", base_price=Decimal("80.00"),
                sale_price=Decimal("50.00"), stock_qty=5),
        Product(id=3, artisan_id=2, title="Handloom Stole", base_price=Decimal("30.00"), stock_qty=1),
        Address(id=1, user_id=CUSTOMER_ID, full_name="Asha Rao", street="12 MG Road",
                city="Bengaluru", state="Karnataka", pincode="560001", is_default=True),
        Address(id=2, user_id=OTHER_CUSTOMER_ID, full_name="Ravi Kumar", street="4 Park Street",
                city="Kolkata", state="West Bengal", pincode="700016", is_default=True),
        Coupon(id=1, artisan_id=1, code="SAVE10", discount_percentage=10, max_uses=1,
               current_uses=0, expiry_date=None, is_active=True),
        Coupon(id=2, artisan_id=1, code="OLDDEAL", discount_percentage=20, max_uses=100,
               current_uses=0, expiry_date=now - timedelta(days=1), is_active=True),
        Coupon(id=3, artisan_id=2, code="PAUSED", discount_percentage=15, max_uses=100,
               current_uses=0, expiry_date=None, is_active=False),
    ])
    db_session.commit()
    return SimpleNamespace(now=now)


@pytest.fixture
def customer():
    return CurrentUser(id=CUSTOMER_ID, role="CUSTOMER")


@pytest.fixture
def artisan_user():
    return CurrentUser(id=ARTISAN_USER_ID, role="ARTISAN")
