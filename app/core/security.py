"""JWT 鉴权依赖

令牌由认证服务签发，本服务只做校验：
payload 中的 id / role 解析为 CurrentUser，显式传入服务层。
"""

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from app.core.config import settings

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


class UserRole(str, enum.Enum):
    CUSTOMER = "CUSTOMER"
    ARTISAN = "ARTISAN"
    NGO = "NGO"
    ADMIN = "ADMIN"


@dataclass(frozen=True)
class CurrentUser:
    """已认证用户身份"""
    id: int
    role: str


def decode_token(token: str) -> CurrentUser:
    """解析并校验 JWT，失败抛 401"""
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )
        return CurrentUser(id=int(payload["id"]), role=str(payload["role"]))
    except (JWTError, KeyError, TypeError, ValueError) as e:
        logger.warning(f"Token validation failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="令牌无效或已过期",
            headers={"WWW-Authenticate": "Bearer"},
        )


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> CurrentUser:
    """获取当前登录用户（未携带令牌返回 403）"""
    if credentials is None:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="未提供令牌")
    return decode_token(credentials.credentials)


def require_roles(*roles: UserRole):
    """限定角色的依赖工厂"""
    allowed = {r.value for r in roles}

    def checker(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role not in allowed:
            logger.warning(f"Role {user.role} rejected, require {sorted(allowed)}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"需要 {' 或 '.join(sorted(allowed))} 角色",
            )
        return user

    return checker


CustomerDep = Depends(require_roles(UserRole.CUSTOMER))
ArtisanDep = Depends(require_roles(UserRole.ARTISAN))
