"""Scale settings of a TPC-C database, read from per-table JSON files."""

from __future__ import annotations

import json
from dataclasses import dataclass
from os import PathLike
from pathlib import Path
from typing import Union

PathType = Union[str, "PathLike[str]"]


def load_bucket_count(path: PathType) -> int:
    """Read the ``table.bkt_num`` value from a table configuration file."""
    with open(path, encoding="utf-8") as handle:
        document = json.load(handle)
    if not isinstance(document, dict) or not isinstance(document.get("table"), dict):
        raise ValueError(f"{path}: missing 'table' object")
    table = document["table"]
    if "bkt_num" not in table:
        raise ValueError(f"{path}: missing 'table.bkt_num'")
    value = table["bkt_num"]
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{path}: 'table.bkt_num' must be an integer")
    if value < 0:
        raise ValueError(f"{path}: 'table.bkt_num' must not be negative")
    return value


@dataclass
class ScaleConfig:
    """Number of rows of each scaled TPC-C entity."""

    num_warehouse: int = 3000
    num_district_per_warehouse: int = 10
    num_customer_per_district: int = 3000
    num_item: int = 100000
    num_stock_per_warehouse: int = 100000

    @classmethod
    def from_directory(cls, directory: PathType) -> "ScaleConfig":
        """Build a configuration from the table files in ``directory``."""
        base = Path(directory)
        return cls(
            num_warehouse=load_bucket_count(base / "warehouse.json"),
            num_district_per_warehouse=load_bucket_count(base / "district.json"),
            num_customer_per_district=load_bucket_count(base / "customer.json"),
            num_item=load_bucket_count(base / "item.json"),
            num_stock_per_warehouse=load_bucket_count(base / "stock.json"),
        )