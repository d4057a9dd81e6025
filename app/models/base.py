from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    # Models use classic Column() attributes with plain type annotations.
    __allow_unmapped__ = True
