from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.exceptions import NotAnArtisan
from app.core.security import CurrentUser
from app.models.artisan import Artisan


def get_artisan_for_user(db: Session, user: CurrentUser) -> Artisan:
    """根据登录用户查找手工艺人档案，不存在抛 403"""
    artisan = db.execute(
        select(Artisan).where(Artisan.user_id == user.id)
    ).scalar_one_or_none()
    if artisan is None:
        raise NotAnArtisan()
    return artisan
