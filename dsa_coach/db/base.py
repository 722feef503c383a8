import asyncio

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase

# asyncpg connect timeouts surface as asyncio.TimeoutError, which is not an OSError before 3.11
DATABASE_ERRORS = (SQLAlchemyError, OSError, asyncio.TimeoutError)


class Base(DeclarativeBase):
    pass
