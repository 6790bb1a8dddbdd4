# catalog/services/sql_catalog.py
import logging
from contextlib import contextmanager
from typing import Iterator, List

from sqlalchemy.orm import Session

from catalog.core.database import Base, create_catalog_engine, create_session_factory
from catalog.core.decorator import NotFoundException, storage_exception
from catalog.models import Category, Item
from catalog.schemas.category import CategoryResponse
from catalog.schemas.item import ItemResponse
from catalog.services.catalog import CatalogStore

logger = logging.getLogger(__name__)

# Range of a SQLite INTEGER column
SQLITE_MIN_INTEGER = -(2**63)
SQLITE_MAX_INTEGER = 2**63 - 1


class SqlCatalogStore(CatalogStore):
    """Relational backend: one row per item, ids are primary keys."""

    backend_name = "sqlite"

    def __init__(self, database_path: str, allowed_extensions=None, echo: bool = False):
        super().__init__(allowed_extensions)
        self.database_path = database_path
        self.engine = create_catalog_engine(database_path, echo=echo)
        self.session_factory = create_session_factory(self.engine)
        self._create_tables()

    @storage_exception
    def _create_tables(self) -> None:
        Base.metadata.create_all(bind=self.engine)
        logger.info("✓ Catalog tables ready")

    @contextmanager
    def _session(self) -> Iterator[Session]:
        db = self.session_factory()
        try:
            yield db
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    @staticmethod
    def _get_or_create_category(db: Session, name: str) -> Category:
        category = db.query(Category).filter(Category.name == name).first()
        if category is None:
            category = Category(name=name)
            db.add(category)
            db.flush()
            logger.info(f"Registered category: {name}")
        return category

    # ==================== Operations ====================

    @storage_exception
    def add(
        self, name: str, category: str, image_original_filename: str
    ) -> ItemResponse:
        image_file_name = self._prepare(name, category, image_original_filename)

        with self._session() as db:
            if category:
                self._get_or_create_category(db, category)

            item = Item(
                name=name, category=category or "", image_file_name=image_file_name
            )
            db.add(item)
            db.commit()
            db.refresh(item)

            logger.info(f"Item stored with id {item.id}: {name}")
            return ItemResponse.model_validate(item)

    @storage_exception
    def list_items(self) -> List[ItemResponse]:
        with self._session() as db:
            items = db.query(Item).order_by(Item.id.asc()).all()
            return [ItemResponse.model_validate(item) for item in items]

    @storage_exception
    def get_by_id(self, item_id: int) -> ItemResponse:
        if not SQLITE_MIN_INTEGER <= item_id <= SQLITE_MAX_INTEGER:
            raise NotFoundException(f"Item not found: {item_id}")

        with self._session() as db:
            item = db.query(Item).filter(Item.id == item_id).first()
            if not item:
                raise NotFoundException(f"Item not found: {item_id}")
            return ItemResponse.model_validate(item)

    @storage_exception
    def search(self, keyword: str) -> List[ItemResponse]:
        # % and _ in the keyword act as LIKE wildcards
        with self._session() as db:
            items = (
                db.query(Item)
                .filter(Item.name.like(f"%{keyword or ''}%"))
                .order_by(Item.id.asc())
                .all()
            )
            return [ItemResponse.model_validate(item) for item in items]

    @storage_exception
    def list_categories(self) -> List[CategoryResponse]:
        with self._session() as db:
            categories = db.query(Category).order_by(Category.id.asc()).all()
            return [CategoryResponse.model_validate(c) for c in categories]

    def close(self) -> None:
        self.engine.dispose()
