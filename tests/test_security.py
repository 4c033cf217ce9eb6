"""鉴权依赖单元测试"""
import pytest
from datetime import timedelta
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from jose import jwt

from app.core.config import settings
from app.core.security import (
    CurrentUser,
    UserRole,
    decode_token,
    get_current_user,
    require_roles,
)

from helpers import make_token


class TestSecurity:

    def test_decode_valid_token(self):
        user = decode_token(make_token(7, "CUSTOMER"))

        assert user == CurrentUser(id=7, role="CUSTOMER")

    def test_decode_expired_token(self):
        with pytest.raises(HTTPException) as exc_info:
            decode_token(make_token(7, "CUSTOMER", expires_in=timedelta(seconds=-10)))

        assert exc_info.value.status_code == 401

    def test_decode_wrong_secret(self):
        token = jwt.encode({"id": 7, "role": "CUSTOMER"}, "another-secret", algorithm="HS256")

        with pytest.raises(HTTPException) as exc_info:
            decode_token(token)

        assert exc_info.value.status_code == 401

    def test_decode_missing_claims(self):
        token = jwt.encode({"sub": "7"}, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)

        with pytest.raises(HTTPException) as exc_info:
            decode_token(token)

        assert exc_info.value.status_code == 401

    def test_missing_credentials(self):
        with pytest.raises(HTTPException) as exc_info:
            get_current_user(None)

        assert exc_info.value.status_code == 403

    def test_get_current_user(self):
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials=make_token(100, "ARTISAN"))

        assert get_current_user(credentials) == CurrentUser(id=100, role="ARTISAN")

    def test_require_roles(self):
        checker = require_roles(UserRole.CUSTOMER)
        customer = CurrentUser(id=7, role="CUSTOMER")

        assert checker(customer) is customer
        with pytest.raises(HTTPException) as exc_info:
            checker(CurrentUser(id=100, role="ARTISAN"))
        assert exc_info.value.status_code == 403
