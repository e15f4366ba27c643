"""
Declarative base shared by every ORM model.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    # Models use plain Column() with bare annotations, not Mapped[]
    __allow_unmapped__ = True
