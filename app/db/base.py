from sqlalchemy import BigInteger, Integer
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


# SQLite 只对 INTEGER PRIMARY KEY 自增
BigIntId = BigInteger().with_variant(Integer, "sqlite")
