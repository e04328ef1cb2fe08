"""ORM model for construction projects (selectable at login)."""

from sqlalchemy import Column, Integer, String

from app.models.base import Base


class Project(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    status = Column(String(32), nullable=False, default="planning", index=True)
