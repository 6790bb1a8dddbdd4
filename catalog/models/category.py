# catalog/models/category.py
from sqlalchemy import Column, Integer, Text

from catalog.core.database import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(Text, nullable=False, unique=True, index=True)

    def __repr__(self):
        return f"<Category(id={self.id}, name='{self.name}')>"
