from typing import Annotated, List, Literal

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode


class Settings(BaseSettings):
    # Application Information
    app_name: str = Field(default="Item Catalog")
    app_description: str = Field(
        default="Catalog of named, categorized items with photos"
    )
    app_version: str = Field(default="1.0.0")
    debug: bool = Field(default=False)

    # Cross-origin caller allowed to use the API
    front_url: str = Field(default="http://localhost:3000")

    # Catalog Storage
    catalog_backend: Literal["json", "sqlite"] = Field(default="json")
    items_file: str = Field(default="items.json")
    database_path: str = Field(default="db/items.db")

    # Image Storage
    image_dir: str = Field(default="images")
    default_image: str = Field(default="default.jpg")
    image_persistence: Literal["best-effort", "strict"] = Field(
        default="best-effort"
    )
    allowed_image_extensions: Annotated[List[str], NoDecode] = Field(
        default=[".jpg"]
    )

    # Logging
    log_level: str = Field(default="info")
    log_file: str = Field(default="logs/app.log")

    # ============================
    # Generic comma-separated parser
    # ============================
    @staticmethod
    def _parse_csv(value, default):
        if isinstance(value, str):
            items = [x.strip() for x in value.split(",") if x.strip()]
            return items if items else default
        if isinstance(value, list):
            return value
        return default

    @field_validator("allowed_image_extensions", mode="before")
    def validate_image_extensions(cls, v):
        return cls._parse_csv(v, [".jpg"])

    @field_validator("log_level", mode="before")
    def validate_log_level(cls, v):
        return str(v).lower() if v else "info"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


def load_settings():
    try:
        settings = Settings()
        print("✅ Settings loaded successfully!")
        return settings
    except ValidationError as e:
        print("❌ Validation Error:", e)
        raise


settings = load_settings()
