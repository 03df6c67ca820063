"""Buffered read/write transactions and the New-Order and Payment procedures."""

from __future__ import annotations

import copy
from collections.abc import Hashable
from typing import Any

from tpccbench.database import TpccDatabase
from tpccbench.schema import (
    ADD_MAGIC,
    BAD_CREDIT,
    NEW_ORDER_REMOTE_ITEM_PCT,
    UNIFORM_ITEM_DIST,
    ZIP_MAGIC,
    CustomerValue,
    HistoryValue,
    NewOrderValue,
    OrderIndexValue,
    OrderLineValue,
    OrderValue,
    TableType,
)
from tpccbench.tpccrandom import Clock, TpccRandom

_PUT = "put"
_DELETE = "delete"


class TransactionAborted(Exception):
    """Raised when a transaction cannot continue, e.g. a required record is missing."""

    def __init__(self, table_type: TableType, key: Hashable, reason: str = "record not found") -> None:
        self.table_type = TableType(table_type)
        self.key = key
        super().__init__(f"{self.table_type.name} {key!r}: {reason}")


def _verify(condition: bool, what: str) -> None:
    if not condition:
        raise RuntimeError(f"Read {what} unmatch")


class Transaction:
    """A transaction over a :class:`TpccDatabase` whose writes land on commit.

    Reads see the transaction's own pending writes.  A missing record on a
    required read aborts the transaction; :meth:`probe` looks without aborting.
    """

    def __init__(self, database: TpccDatabase) -> None:
        self.database = database
        self._writes: dict[tuple[TableType, Hashable], tuple[str, Any]] = {}
        self._finished = False
        self.committed = False

    def _check_active(self) -> None:
        if self._finished:
            raise RuntimeError("transaction already finished")

    def _abort(self, table_type: TableType, key: Hashable, reason: str = "record not found") -> None:
        self._finished = True
        raise TransactionAborted(table_type, key, reason)

    def _lookup(self, table_type: TableType, key: Hashable) -> tuple[bool, Any]:
        """Return (pending, record); record is None when absent."""
        entry = self._writes.get((TableType(table_type), key))
        if entry is not None:
            op, value = entry
            return True, (value if op == _PUT else None)
        return False, self.database.get_record(table_type, key)

    def probe(self, table_type: TableType, key: Hashable) -> Any | None:
        """Return a copy of the record, or None when it does not exist."""
        self._check_active()
        _, record = self._lookup(table_type, key)
        return None if record is None else copy.deepcopy(record)

    def read(self, table_type: TableType, key: Hashable) -> Any:
        """Return a copy of the record; abort when it does not exist."""
        record = self.probe(table_type, key)
        if record is None:
            self._abort(table_type, key)
        return record

    def read_for_update(self, table_type: TableType, key: Hashable) -> Any:
        """Return the record for modification; changes are written on commit."""
        self._check_active()
        pending, record = self._lookup(table_type, key)
        if record is None:
            self._abort(table_type, key)
        if pending:
            return record
        working = copy.deepcopy(record)
        self._writes[(TableType(table_type), key)] = (_PUT, working)
        return working

    def insert(self, table_type: TableType, key: Hashable, value: Any) -> Any:
        """Stage ``value`` under ``key``; the returned object may still be filled in."""
        self._check_active()
        self._writes[(TableType(table_type), key)] = (_PUT, value)
        return value

    def delete(self, table_type: TableType, key: Hashable) -> None:
        """Stage removal of an existing record; abort when it does not exist."""
        self._check_active()
        _, record = self._lookup(table_type, key)
        if record is None:
            self._abort(table_type, key)
        self._writes[(TableType(table_type), key)] = (_DELETE, None)

    def commit(self) -> bool:
        """Apply every staged write to the database."""
        self._check_active()
        for (table_type, key), (op, value) in self._writes.items():
            table = self.database.table(table_type)
            if op == _PUT:
                table.insert(key, value)
            elif key in table:
                table.delete(key)
        self._finished = True
        self.committed = True
        return True


def _pick_stocks(
    database: TpccDatabase, rng: TpccRandom, warehouse_id: int, num_items: int
) -> tuple[list[tuple[int, int, int]], list[tuple[int, int, int]], int]:
    """Choose distinct stock rows: (item id, supplier, stock key) local and remote."""
    scale = database.scale
    keys = database.keys
    seen: set[int] = set()
    local: list[tuple[int, int, int]] = []
    remote: list[tuple[int, int, int]] = []
    all_local = 1
    while len(local) + len(remote) < num_items:
        item_id = rng.item_id(scale.num_item, UNIFORM_ITEM_DIST)
        if scale.num_warehouse == 1 or rng.random_number(1, 100) > NEW_ORDER_REMOTE_ITEM_PCT:
            supplier = warehouse_id
            target = local
        else:
            supplier = rng.random_number(1, scale.num_warehouse)
            while supplier == warehouse_id:
                supplier = rng.random_number(1, scale.num_warehouse)
            all_local = 0
            target = remote
        s_key = keys.stock_key(supplier, item_id)
        if s_key in seen:
            continue
        seen.add(s_key)
        target.append((item_id, supplier, s_key))
    return local, remote, all_local


def new_order(database: TpccDatabase, rng: TpccRandom, clock: Clock) -> bool:
    """Run one New-Order transaction; return whether it committed."""
    scale = database.scale
    keys = database.keys
    warehouse_id = rng.pick_warehouse_id(1, scale.num_warehouse)
    district_id = rng.random_number(1, scale.num_district_per_warehouse)
    customer_id = rng.customer_id(scale.num_customer_per_district)
    c_key = keys.customer_key(warehouse_id, district_id, customer_id)

    num_items = rng.random_number(OrderLineValue.MIN_OL_CNT, OrderLineValue.MAX_OL_CNT)
    local, remote, all_local = _pick_stocks(database, rng, warehouse_id, num_items)

    tx = Transaction(database)
    try:
        warehouse = tx.read(TableType.WAREHOUSE, warehouse_id)
        _verify(warehouse.w_zip == ZIP_MAGIC, "warehouse")
        customer = tx.read(TableType.CUSTOMER, c_key)
        _verify(customer.c_since != 0, "customer")
        district = tx.read_for_update(TableType.DISTRICT, keys.district_key(warehouse_id, district_id))
        _verify(district.d_zip == ZIP_MAGIC, "district")

        o_id = district.d_next_o_id
        district.d_next_o_id += 1

        o_key = keys.order_key(warehouse_id, district_id, o_id)
        tx.insert(
            TableType.NEW_ORDER,
            keys.new_order_key(warehouse_id, district_id, o_id),
            NewOrderValue(debug_magic=ADD_MAGIC),
        )
        tx.insert(
            TableType.ORDER,
            o_key,
            OrderValue(
                o_c_id=customer_id,
                o_carrier_id=0,
                o_ol_cnt=num_items,
                o_all_local=all_local,
                o_entry_d=clock.tick(),
            ),
        )
        tx.insert(
            TableType.ORDER_INDEX,
            keys.order_index_key(warehouse_id, district_id, customer_id, o_id),
            OrderIndexValue(o_id=o_key, debug_magic=ADD_MAGIC),
        )

        for ol_number, (item_id, supplier, s_key) in enumerate(local + remote, start=1):
            quantity = rng.random_number(1, 10)
            item = tx.read(TableType.ITEM, item_id)
            stock = tx.read_for_update(TableType.STOCK, s_key)
            _verify(item.debug_magic == ADD_MAGIC, "item")
            _verify(stock.debug_magic == ADD_MAGIC, "stock")

            if stock.s_quantity - quantity >= 10:
                stock.s_quantity -= quantity
            else:
                stock.s_quantity += 91 - quantity
            stock.s_ytd += quantity
            stock.s_remote_cnt += 0 if supplier == warehouse_id else 1

            tx.insert(
                TableType.ORDER_LINE,
                keys.order_line_key(warehouse_id, district_id, o_id, ol_number),
                OrderLineValue(
                    ol_i_id=item_id,
                    ol_supply_w_id=supplier,
                    ol_quantity=quantity,
                    ol_amount=quantity * item.i_price,
                    ol_delivery_d=0,
                    debug_magic=ADD_MAGIC,
                ),
            )
        return tx.commit()
    except TransactionAborted:
        return False


def payment(database: TpccDatabase, rng: TpccRandom, clock: Clock) -> bool:
    """Run one Payment transaction; return whether it committed."""
    scale = database.scale
    keys = database.keys
    x = rng.random_number(1, 100)
    y = rng.random_number(1, 100)

    warehouse_id = rng.pick_warehouse_id(1, scale.num_warehouse)
    district_id = rng.random_number(1, scale.num_district_per_warehouse)

    if scale.num_warehouse == 1 or x <= 85:
        c_w_id, c_d_id = warehouse_id, district_id
    else:
        c_w_id = rng.random_number(1, scale.num_warehouse)
        while c_w_id == warehouse_id:
            c_w_id = rng.random_number(1, scale.num_warehouse)
        c_d_id = rng.random_number(1, scale.num_district_per_warehouse)

    h_amount = rng.random_number(100, 500000) / 100.0
    if y <= 60:
        # Lookup by last name is not supported by the key-value store; the
        # names are still drawn so that the random stream stays the same.
        rng.last_name_load()
        rng.last_name_load()
    customer_id = rng.customer_id(scale.num_customer_per_district)

    tx = Transaction(database)
    try:
        warehouse = tx.read_for_update(TableType.WAREHOUSE, warehouse_id)
        district = tx.read_for_update(TableType.DISTRICT, keys.district_key(warehouse_id, district_id))
        customer = tx.read_for_update(TableType.CUSTOMER, keys.customer_key(c_w_id, c_d_id, customer_id))
        history = tx.insert(
            TableType.HISTORY,
            keys.history_key(warehouse_id, district_id, c_w_id, c_d_id, customer_id),
            HistoryValue(),
        )

        _verify(warehouse.w_zip == ZIP_MAGIC, "warehouse")
        _verify(district.d_zip == ZIP_MAGIC, "district")
        _verify(customer.c_since != 0, "customer")

        warehouse.w_ytd += h_amount
        district.d_ytd += h_amount
        customer.c_balance -= h_amount
        customer.c_ytd_payment += h_amount
        customer.c_payment_cnt += 1

        if customer.c_credit == BAD_CREDIT:
            entry = "(%d, %d, %d, %d, %d, %.2f)\n" % (
                customer_id,
                c_d_id,
                c_w_id,
                district_id,
                warehouse_id,
                h_amount,
            )
            keep = len(customer.c_data)
            if keep + len(entry) > CustomerValue.MAX_DATA:
                keep = CustomerValue.MAX_DATA - len(entry)
            customer.c_data = entry + customer.c_data[:keep]

        history.h_date = clock.tick()
        history.h_amount = h_amount
        history.h_data = warehouse.w_name + "    " + district.d_name
        return tx.commit()
    except TransactionAborted:
        return False