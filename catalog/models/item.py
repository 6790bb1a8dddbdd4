# catalog/models/item.py
from sqlalchemy import Column, Integer, Text

from catalog.core.database import Base


class Item(Base):
    __tablename__ = "items"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Basic Info
    name = Column(Text, nullable=True)
    category = Column(Text, nullable=True)

    # Content-addressed image name (sha256 of the uploaded filename + extension)
    image_file_name = Column("imageFileName", Text, nullable=True)

    def __repr__(self):
        return f"<Item(id={self.id}, name='{self.name}')>"
