import json
import logging
from functools import wraps

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class CatalogException(Exception):
    error_type = "catalog_error"

    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ValidationException(CatalogException):
    error_type = "validation_error"

    def __init__(self, message: str):
        super().__init__(message, 400)


class InvalidImageFormat(ValidationException):
    error_type = "invalid_image_format"


class NotFoundException(CatalogException):
    error_type = "not_found"

    def __init__(self, message: str = "Item not found"):
        super().__init__(message, 404)


class StorageException(CatalogException):
    error_type = "storage_error"

    def __init__(self, message: str = "Storage error occurred"):
        super().__init__(message, 500)


def storage_exception(func):
    """Translate backend failures raised by a store method into StorageException."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except CatalogException:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Database error in {func.__qualname__}: {e}")
            raise StorageException("Database error occurred") from e
        except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
            logger.error(f"Malformed catalog document in {func.__qualname__}: {e}")
            raise StorageException("Catalog document is malformed") from e
        except OSError as e:
            logger.error(f"I/O error in {func.__qualname__}: {e}")
            raise StorageException(f"Storage unavailable: {e.strerror or e}") from e

    return wrapper
