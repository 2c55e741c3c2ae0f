from sqlalchemy import BigInteger, Integer
from sqlalchemy.orm import DeclarativeBase

# SQLite only autoincrements INTEGER PRIMARY KEY columns.
BigIntPK = BigInteger().with_variant(Integer(), "sqlite")


class Base(DeclarativeBase):
    # Server-generated columns are loaded at flush; async sessions cannot lazy-load them.
    __mapper_args__ = {"eager_defaults": True}
