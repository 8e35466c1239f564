"""College model."""

from sqlalchemy import Column, String

from campus_placement.db.base import Base


class College(Base):
    __tablename__ = "colleges"

    name = Column(String(200), unique=True, nullable=False, index=True)

    def __repr__(self):
        return f"<College {self.name}>"
