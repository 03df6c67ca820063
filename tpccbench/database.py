"""In-memory TPC-C tables and the initial population of their rows."""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterator
from typing import Any

from tpccbench.config import ScaleConfig
from tpccbench.keys import KeyMaker
from tpccbench.schema import (
    ADD_MAGIC,
    BAD_CREDIT,
    GOOD_CREDIT,
    ZIP_MAGIC,
    Address,
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
from tpccbench.tpccrandom import Clock, TpccRandom, customer_last_name

logger = logging.getLogger(__name__)


class Table:
    """A keyed record store for one TPC-C table."""

    def __init__(self, table_type: TableType, bucket_count: int) -> None:
        if bucket_count < 0:
            raise ValueError("bucket count must not be negative")
        self.table_type = TableType(table_type)
        self.bucket_count = int(bucket_count)
        self._records: dict[Hashable, Any] = {}

    def insert(self, key: Hashable, value: Any) -> Any:
        """Store ``value`` under ``key``, replacing any earlier record."""
        self._records[key] = value
        return value

    def get(self, key: Hashable) -> Any | None:
        """Return the record under ``key``, or None when there is none."""
        return self._records.get(key)

    def delete(self, key: Hashable) -> Any:
        """Remove and return the record under ``key``."""
        try:
            return self._records.pop(key)
        except KeyError:
            raise KeyError(f"{self.table_type.name}: no record for key {key!r}") from None

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, key: object) -> bool:
        return key in self._records

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._records)

    def items(self):
        """Iterate over ``(key, record)`` pairs."""
        return self._records.items()

    def values(self):
        """Iterate over the stored records."""
        return self._records.values()


def _address(rng: TpccRandom) -> tuple[str, str, str, str]:
    street_1 = rng.random_str(rng.random_number(Address.MIN_STREET, Address.MAX_STREET))
    street_2 = rng.random_str(rng.random_number(Address.MIN_STREET, Address.MAX_STREET))
    city = rng.random_str(rng.random_number(Address.MIN_CITY, Address.MAX_CITY))
    state = rng.random_str(Address.STATE)
    return street_1, street_2, city, state


def _item_data(rng: TpccRandom, min_len: int, max_len: int) -> str:
    length = rng.random_number(min_len, max_len)
    if rng.random_number(1, 100) > 10:
        return rng.random_str(length)
    start = rng.random_number(2, length - 8)
    return rng.random_str(start) + "ORIGINAL" + rng.random_str(length - start - 8)


class TpccDatabase:
    """The TPC-C tables of one node, with loaders for their initial rows."""

    def __init__(self, scale: ScaleConfig | None = None, clock: Clock | None = None) -> None:
        self.bench_name = "TPCC"
        self.scale = scale if scale is not None else ScaleConfig()
        self.clock = clock if clock is not None else Clock()
        self.keys = KeyMaker(
            num_district_per_warehouse=self.scale.num_district_per_warehouse,
            num_customer_per_district=self.scale.num_customer_per_district,
            num_stock_per_warehouse=self.scale.num_stock_per_warehouse,
        )
        self._tables: dict[TableType, Table] = {}

    def table(self, table_type: TableType) -> Table:
        """Return the table of ``table_type``; it must have been created."""
        try:
            return self._tables[TableType(table_type)]
        except KeyError:
            raise KeyError(f"table {TableType(table_type).name} has not been created") from None

    def has_table(self, table_type: TableType) -> bool:
        """Whether the table of ``table_type`` has been created."""
        return TableType(table_type) in self._tables

    def create_table(self, table_type: TableType, bucket_count: int) -> Table:
        """Create (or recreate, emptied) the table of ``table_type``."""
        table = Table(table_type, int(bucket_count))
        self._tables[table.table_type] = table
        return table

    def load_record(self, table_type: TableType, key: Hashable, value: Any) -> Any:
        """Insert ``value`` under ``key`` into the table of ``table_type``."""
        return self.table(table_type).insert(key, value)

    def get_record(self, table_type: TableType, key: Hashable) -> Any | None:
        """Look up ``key`` in the table of ``table_type``."""
        return self.table(table_type).get(key)

    def populate_warehouse(self, seed: int) -> int:
        """Fill the warehouse table; return the number of rows loaded."""
        self.table(TableType.WAREHOUSE)
        rng = TpccRandom(seed)
        count = 0
        for w_id in range(1, self.scale.num_warehouse + 1):
            w_tax = rng.random_number(0, 2000) / 10000.0
            name = rng.random_str(rng.random_number(WarehouseValue.MIN_NAME, WarehouseValue.MAX_NAME))
            street_1, street_2, city, state = _address(rng)
            value = WarehouseValue(
                w_tax=w_tax,
                w_ytd=300000 * 100,
                w_name=name,
                w_street_1=street_1,
                w_street_2=street_2,
                w_city=city,
                w_state=state,
                w_zip=ZIP_MAGIC,
            )
            self.load_record(TableType.WAREHOUSE, w_id, value)
            count += 1
        return count

    def populate_district(self, seed: int) -> int:
        """Fill the district table; return the number of rows loaded."""
        self.table(TableType.DISTRICT)
        rng = TpccRandom(seed)
        count = 0
        for w_id in range(1, self.scale.num_warehouse + 1):
            for d_id in range(1, self.scale.num_district_per_warehouse + 1):
                d_tax = rng.random_number(0, 2000) / 10000.0
                name = rng.random_str(rng.random_number(DistrictValue.MIN_NAME, DistrictValue.MAX_NAME))
                street_1, street_2, city, state = _address(rng)
                value = DistrictValue(
                    d_tax=d_tax,
                    d_ytd=30000 * 100,
                    d_next_o_id=self.scale.num_customer_per_district + 1,
                    d_name=name,
                    d_street_1=street_1,
                    d_street_2=street_2,
                    d_city=city,
                    d_state=state,
                    d_zip=ZIP_MAGIC,
                )
                self.load_record(TableType.DISTRICT, self.keys.district_key(w_id, d_id), value)
                count += 1
        return count

    def populate_customer_and_history(self, seed: int) -> dict[TableType, int]:
        """Fill the customer, customer-index and history tables."""
        for table_type in (TableType.CUSTOMER, TableType.CUSTOMER_INDEX, TableType.HISTORY):
            self.table(table_type)
        rng = TpccRandom(seed)
        scale = self.scale
        counts = {TableType.CUSTOMER: 0, TableType.CUSTOMER_INDEX: 0, TableType.HISTORY: 0}
        logger.debug(
            "num_warehouse = %d, num_district_per_warehouse = %d, num_customer_per_district = %d",
            scale.num_warehouse,
            scale.num_district_per_warehouse,
            scale.num_customer_per_district,
        )
        for w_id in range(1, scale.num_warehouse + 1):
            for d_id in range(1, scale.num_district_per_warehouse + 1):
                for c_id in range(1, scale.num_customer_per_district + 1):
                    customer_key = self.keys.customer_key(w_id, d_id, c_id)
                    discount = rng.random_number(1, 5000) / 10000.0
                    credit = BAD_CREDIT if rng.random_number(1, 100) <= 10 else GOOD_CREDIT
                    if c_id <= scale.num_customer_per_district // 3:
                        last = customer_last_name(c_id - 1)
                    else:
                        last = rng.last_name_load()
                    first = rng.random_str(
                        rng.random_number(CustomerValue.MIN_FIRST, CustomerValue.MAX_FIRST)
                    )
                    street_1, street_2, city, state = _address(rng)
                    zip_code = rng.random_nstr(4) + "11111"
                    phone = rng.random_nstr(CustomerValue.PHONE)
                    since = self.clock.tick()
                    data = rng.random_str(rng.random_number(CustomerValue.MIN_DATA, CustomerValue.MAX_DATA))
                    customer = CustomerValue(
                        c_credit_lim=50000,
                        c_discount=discount,
                        c_balance=-10,
                        c_ytd_payment=10,
                        c_payment_cnt=1,
                        c_delivery_cnt=0,
                        c_first=first,
                        c_middle="OE",
                        c_last=last,
                        c_street_1=street_1,
                        c_street_2=street_2,
                        c_city=city,
                        c_state=state,
                        c_zip=zip_code,
                        c_phone=phone,
                        c_since=since,
                        c_credit=credit,
                        c_data=data,
                    )
                    self.load_record(TableType.CUSTOMER, customer_key, customer)
                    counts[TableType.CUSTOMER] += 1

                    index_key = self.keys.customer_index_key(w_id, d_id, last, first)
                    if self.get_record(TableType.CUSTOMER_INDEX, index_key) is None:
                        self.load_record(
                            TableType.CUSTOMER_INDEX,
                            index_key,
                            CustomerIndexValue(c_id=customer_key, debug_magic=ADD_MAGIC),
                        )
                        counts[TableType.CUSTOMER_INDEX] += 1

                    history_key = self.keys.history_key(w_id, d_id, w_id, d_id, c_id)
                    history = HistoryValue(h_amount=10, h_date=self.clock.tick())
                    history.h_data = rng.random_str(
                        rng.random_number(HistoryValue.MIN_DATA, HistoryValue.MAX_DATA)
                    )
                    self.load_record(TableType.HISTORY, history_key, history)
                    counts[TableType.HISTORY] += 1
        return counts

    def populate_orders(self, seed: int) -> dict[TableType, int]:
        """Fill the order, order-index, new-order and order-line tables."""
        for table_type in (
            TableType.ORDER,
            TableType.ORDER_INDEX,
            TableType.NEW_ORDER,
            TableType.ORDER_LINE,
        ):
            self.table(table_type)
        rng = TpccRandom(seed)
        scale = self.scale
        num_customer = scale.num_customer_per_district
        delivered_bound = num_customer * 0.7
        new_order_bound = num_customer * NewOrderValue.SCALE_CONSTANT_BETWEEN_NEWORDER_ORDER
        counts = {
            TableType.ORDER: 0,
            TableType.ORDER_INDEX: 0,
            TableType.NEW_ORDER: 0,
            TableType.ORDER_LINE: 0,
        }
        for w_id in range(1, scale.num_warehouse + 1):
            for d_id in range(1, scale.num_district_per_warehouse + 1):
                seen: set[int] = set()
                c_ids: list[int] = []
                while len(c_ids) != num_customer:
                    candidate = rng.next() % num_customer + 1
                    if candidate in seen:
                        continue
                    seen.add(candidate)
                    c_ids.append(candidate)

                for c, o_c_id in enumerate(c_ids, start=1):
                    order_key = self.keys.order_key(w_id, d_id, c)
                    if c <= delivered_bound:
                        carrier = rng.random_number(OrderValue.MIN_CARRIER_ID, OrderValue.MAX_CARRIER_ID)
                    else:
                        carrier = 0
                    ol_cnt = rng.random_number(OrderLineValue.MIN_OL_CNT, OrderLineValue.MAX_OL_CNT)
                    order = OrderValue(
                        o_c_id=o_c_id,
                        o_carrier_id=carrier,
                        o_ol_cnt=ol_cnt,
                        o_all_local=1,
                        o_entry_d=self.clock.tick(),
                    )
                    self.load_record(TableType.ORDER, order_key, order)
                    counts[TableType.ORDER] += 1

                    index_key = self.keys.order_index_key(w_id, d_id, o_c_id, c)
                    if self.get_record(TableType.ORDER_INDEX, index_key) is None:
                        self.load_record(
                            TableType.ORDER_INDEX,
                            index_key,
                            OrderIndexValue(o_id=order_key, debug_magic=ADD_MAGIC),
                        )
                        counts[TableType.ORDER_INDEX] += 1

                    if c > new_order_bound:
                        self.load_record(
                            TableType.NEW_ORDER,
                            self.keys.new_order_key(w_id, d_id, c),
                            NewOrderValue(debug_magic=ADD_MAGIC),
                        )
                        counts[TableType.NEW_ORDER] += 1

                    for number in range(1, ol_cnt + 1):
                        i_id = rng.random_number(1, scale.num_item)
                        if c <= delivered_bound:
                            delivery_d = order.o_entry_d
                            amount = 0.0
                        else:
                            delivery_d = 0
                            amount = rng.random_number(1, 999999) / 100.0
                        line = OrderLineValue(
                            ol_i_id=i_id,
                            ol_supply_w_id=w_id,
                            ol_quantity=5,
                            ol_amount=amount,
                            ol_delivery_d=delivery_d,
                            debug_magic=ADD_MAGIC,
                        )
                        self.load_record(
                            TableType.ORDER_LINE,
                            self.keys.order_line_key(w_id, d_id, c, number),
                            line,
                        )
                        counts[TableType.ORDER_LINE] += 1
        logger.info(
            "total_order_records_inserted = %d, total_order_records_examined = %d",
            counts[TableType.ORDER],
            counts[TableType.ORDER],
        )
        return counts

    def populate_items(self, seed: int) -> int:
        """Fill the item table; return the number of rows loaded."""
        self.table(TableType.ITEM)
        rng = TpccRandom(seed)
        count = 0
        for i_id in range(1, self.scale.num_item + 1):
            name = rng.random_str(rng.random_number(ItemValue.MIN_NAME, ItemValue.MAX_NAME))
            price = rng.random_number(100, 10000) / 100.0
            data = _item_data(rng, ItemValue.MIN_DATA, ItemValue.MAX_DATA)
            im_id = rng.random_number(ItemValue.MIN_IM, ItemValue.MAX_IM)
            value = ItemValue(
                i_im_id=im_id,
                i_price=price,
                i_name=name,
                i_data=data,
                debug_magic=ADD_MAGIC,
            )
            self.load_record(TableType.ITEM, i_id, value)
            count += 1
        return count

    def populate_stock(self, seed: int) -> int:
        """Fill the stock table; return the number of rows loaded.

        Every row draws from a generator freshly seeded with ``seed``.
        """
        self.table(TableType.STOCK)
        count = 0
        for w_id in range(1, self.scale.num_warehouse + 1):
            for i_id in range(1, self.scale.num_item + 1):
                rng = TpccRandom(seed)
                quantity = rng.random_number(10, 100)
                data = _item_data(rng, StockValue.MIN_DATA, StockValue.MAX_DATA)
                value = StockValue(
                    s_quantity=quantity,
                    s_ytd=0,
                    s_order_cnt=0,
                    s_remote_cnt=0,
                    s_data=data,
                    debug_magic=ADD_MAGIC,
                )
                self.load_record(TableType.STOCK, self.keys.stock_key(w_id, i_id), value)
                count += 1
        return count