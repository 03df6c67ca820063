"""Assignment of TPC-C table groups to nodes and loading of their rows."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from tpccbench.config import ScaleConfig
from tpccbench.database import Table, TpccDatabase
from tpccbench.schema import (
    CustomerIndexValue,
    CustomerValue,
    DistrictValue,
    HistoryValue,
    ItemValue,
    NewOrderValue,
    OrderIndexValue,
    OrderLineValue,
    OrderValue,
    StockValue,
    TableType,
    WarehouseValue,
)

logger = logging.getLogger(__name__)

# Fraction of the order rows for which new-order buckets are reserved.
_NEW_ORDER_BUCKET_RATIO = 0.3
# Order lines reserved per order.
_ORDER_LINE_BUCKET_RATIO = 15


class TableGroup(Enum):
    """Tables that are created and populated together, placed by an anchor table."""

    WAREHOUSE = ("Warehouse", TableType.WAREHOUSE, (TableType.WAREHOUSE,), 9324)
    DISTRICT = ("District", TableType.DISTRICT, (TableType.DISTRICT,), 129856349)
    CUSTOMER = (
        "Customer+CustomerIndex+History",
        TableType.CUSTOMER,
        (TableType.CUSTOMER, TableType.CUSTOMER_INDEX, TableType.HISTORY),
        923587856425,
    )
    ORDER = (
        "Order+OrderIndex+NewOrder+OrderLine",
        TableType.ORDER,
        (TableType.ORDER, TableType.ORDER_INDEX, TableType.NEW_ORDER, TableType.ORDER_LINE),
        2343352,
    )
    STOCK = ("Stock", TableType.STOCK, (TableType.STOCK,), 89785943)
    ITEM = ("Item", TableType.ITEM, (TableType.ITEM,), 235443)

    def __init__(
        self,
        label: str,
        anchor: TableType,
        tables: tuple[TableType, ...],
        seed: int,
    ) -> None:
        self.label = label
        self.anchor = anchor
        self.tables = tables
        self.seed = seed

    def home_node(self, num_server: int) -> int:
        """The node that holds the primary copy of this group."""
        _check_servers(num_server)
        return int(self.anchor) % num_server

    def bucket_counts(self, scale: ScaleConfig) -> dict[TableType, int]:
        """Bucket count reserved for each table of the group."""
        per_district = scale.num_warehouse * scale.num_district_per_warehouse
        per_customer = per_district * scale.num_customer_per_district
        if self is TableGroup.WAREHOUSE:
            return {TableType.WAREHOUSE: scale.num_warehouse}
        if self is TableGroup.DISTRICT:
            return {TableType.DISTRICT: per_district}
        if self is TableGroup.CUSTOMER:
            return {table_type: per_customer for table_type in self.tables}
        if self is TableGroup.ORDER:
            return {
                TableType.ORDER: per_customer,
                TableType.ORDER_INDEX: per_customer,
                TableType.NEW_ORDER: int(per_customer * _NEW_ORDER_BUCKET_RATIO),
                TableType.ORDER_LINE: per_customer * _ORDER_LINE_BUCKET_RATIO,
            }
        if self is TableGroup.STOCK:
            return {TableType.STOCK: scale.num_stock_per_warehouse}
        return {TableType.ITEM: scale.num_item}

    def _populator(self, database: TpccDatabase) -> Callable[[int], object]:
        if self is TableGroup.WAREHOUSE:
            return database.populate_warehouse
        if self is TableGroup.DISTRICT:
            return database.populate_district
        if self is TableGroup.CUSTOMER:
            return database.populate_customer_and_history
        if self is TableGroup.ORDER:
            return database.populate_orders
        if self is TableGroup.STOCK:
            return database.populate_stock
        return database.populate_items

    def load(self, database: TpccDatabase) -> list[Table]:
        """Create the group's tables in ``database``, fill them and return them."""
        tables = [
            database.create_table(table_type, count)
            for table_type, count in self.bucket_counts(database.scale).items()
        ]
        self._populator(database)(self.seed)
        return [database.table(table_type) for table_type in self.tables]


def _check_servers(num_server: int) -> None:
    if num_server <= 0:
        raise ValueError(f"number of servers must be positive, got {num_server}")


@dataclass(frozen=True)
class Placement:
    """Table groups a node holds, as primary and as backup copies."""

    primary: tuple[TableGroup, ...]
    backup: tuple[TableGroup, ...]


def groups_for_node(node_id: int, num_server: int, backup_degree: int) -> Placement:
    """Work out which table groups ``node_id`` holds among ``num_server`` nodes.

    A group's primary lives on the node given by its anchor table id modulo
    the number of servers; its backups live on the following
    ``backup_degree`` nodes, but only when there are more servers than backups.
    """
    _check_servers(num_server)
    primary = tuple(group for group in TableGroup if group.home_node(num_server) == node_id)
    backup: list[TableGroup] = []
    if backup_degree < num_server:
        for distance in range(1, backup_degree + 1):
            source = (node_id - distance + num_server) % num_server
            backup.extend(group for group in TableGroup if group.home_node(num_server) == source)
    return Placement(primary=primary, backup=tuple(backup))


def _log_record_sizes() -> None:
    logger.debug(
        "record sizes: warehouse=%d district=%d customer=%d customer_index=%d history=%d "
        "new_order=%d order=%d order_index=%d order_line=%d item=%d stock=%d",
        WarehouseValue.SIZE,
        DistrictValue.SIZE,
        CustomerValue.SIZE,
        CustomerIndexValue.SIZE,
        HistoryValue.SIZE,
        NewOrderValue.SIZE,
        OrderValue.SIZE,
        OrderIndexValue.SIZE,
        OrderLineValue.SIZE,
        ItemValue.SIZE,
        StockValue.SIZE,
    )


def load_tables(
    database: TpccDatabase,
    node_id: int,
    num_server: int,
    backup_degree: int,
) -> tuple[list[Table], list[Table]]:
    """Create and populate the tables ``node_id`` is responsible for.

    Returns the primary tables and the backup tables, each in load order.
    """
    placement = groups_for_node(node_id, num_server, backup_degree)
    _log_record_sizes()
    primary_tables: list[Table] = []
    for group in placement.primary:
        logger.info("Primary: Initializing %s table", group.label)
        primary_tables.extend(group.load(database))
    backup_tables: list[Table] = []
    for group in placement.backup:
        logger.info("Backup: Initializing %s table", group.label)
        backup_tables.extend(group.load(database))
    return primary_tables, backup_tables