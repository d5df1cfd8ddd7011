"""Configuration loading and validation using PyYAML + Pydantic."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from .headers import DEFAULT_BARCODE_KEYWORDS, DEFAULT_NAME_KEYWORDS, DEFAULT_SCAN_ROWS

DEFAULT_CONFIG_PATH = Path("config") / "promotrack.yaml"

DEFAULT_UNNAMED_ITEM = "Không tên"

# Display-header style first, then the snake-case export style.
DEFAULT_SALE_COLUMN_ALIASES: Dict[str, List[str]] = {
    "sales_day": ["Sales Day", "sales_day"],
    "layer1_code": ["Layer1 Code", "layer1_code"],
    "barcode": ["Barcode", "barcode"],
    "item_name": ["Item Name", "item_name"],
    "qty": ["QTY", "qty"],
    "amount_excl_tax": ["Amount(Tax excl.)", "amount_excl_tax"],
    "transaction_id": ["Slip No.", "slip_no", "Transaction", "transaction_id"],
}


class CatalogConfig(BaseModel):
    """Catalog workbook header detection settings."""

    barcode_keywords: List[str] = Field(
        default_factory=lambda: list(DEFAULT_BARCODE_KEYWORDS),
        description="Tokens identifying the barcode column",
    )
    name_keywords: List[str] = Field(
        default_factory=lambda: list(DEFAULT_NAME_KEYWORDS),
        description="Tokens identifying the item name column",
    )
    header_scan_rows: int = Field(DEFAULT_SCAN_ROWS, ge=1, description="Rows scanned for the header")
    unnamed_item: str = Field(DEFAULT_UNNAMED_ITEM, description="Placeholder for blank item names")

    @field_validator("barcode_keywords", "name_keywords")
    @classmethod
    def validate_keywords(cls, v):
        cleaned = [str(k).strip() for k in v if str(k).strip()]
        if not cleaned:
            raise ValueError("keyword lists must contain at least one non-empty keyword")
        return cleaned


class SalesConfig(BaseModel):
    """Column alias resolution for POS CSV exports."""

    column_aliases: Dict[str, List[str]] = Field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_SALE_COLUMN_ALIASES.items()},
    )

    @field_validator("column_aliases")
    @classmethod
    def validate_aliases(cls, v):
        # Partial overrides keep the built-in aliases for unspecified fields
        merged = {k: list(a) for k, a in DEFAULT_SALE_COLUMN_ALIASES.items()}
        for field_name, aliases in (v or {}).items():
            if field_name not in merged:
                raise ValueError(f"Unknown sale record field '{field_name}'")
            if not aliases:
                raise ValueError(f"Aliases for '{field_name}' must not be empty")
            merged[field_name] = [str(a) for a in aliases]
        return merged


class ReportConfig(BaseModel):
    top_n: int = Field(5, ge=1, description="Length of the qty/revenue rankings")


class LoggingConfig(BaseModel):
    level: str = Field("INFO", description="Logger level name")
    logs_dir: str = Field("logs", description="Directory for log files")
    file_name: str = Field("promotrack.log", description="System log file name")


class PromotrackConfig(BaseModel):
    """Complete application configuration."""

    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    sales: SalesConfig = Field(default_factory=SalesConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_and_validate_config(config_dict: Optional[dict]) -> PromotrackConfig:
    """Validate a raw configuration mapping.

    Raises:
        ValidationError: If configuration is invalid
    """

    return PromotrackConfig(**(config_dict or {}))


def load_config(path: str | Path | None = None) -> PromotrackConfig:
    """Load a YAML configuration file; a missing default file yields defaults."""

    if path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            return PromotrackConfig()
        path = DEFAULT_CONFIG_PATH
    with open(path, "r", encoding="utf-8") as stream:
        return load_and_validate_config(yaml.safe_load(stream) or {})
