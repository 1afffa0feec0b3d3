from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


# Largest value an INTEGER primary key column holds.
MAX_ID = 2_147_483_647
