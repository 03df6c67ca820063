"""The Delivery, Order-Status and Stock-Level procedures and the transaction mix."""

from __future__ import annotations

import logging
from collections.abc import Callable

from tpccbench.database import TpccDatabase
from tpccbench.schema import (
    ADD_MAGIC,
    ZIP_MAGIC,
    NewOrderValue,
    OrderLineValue,
    OrderValue,
    StockValue,
    TableType,
    TxType,
    workgen_array,
)
from tpccbench.tpccrandom import Clock, TpccRandom
from tpccbench.transaction import Transaction, TransactionAborted, new_order, payment

logger = logging.getLogger(__name__)


def _verify(condition: bool, what: str) -> None:
    if not condition:
        raise RuntimeError(f"Read {what} unmatch")


def delivery(database: TpccDatabase, rng: TpccRandom, clock: Clock) -> bool:
    """Run one Delivery transaction; return whether it committed.

    For every district of a warehouse an outstanding new order is picked,
    removed, its order gets a carrier, its lines a delivery date, and the
    customer is credited with the order's total.
    """
    scale = database.scale
    keys = database.keys
    warehouse_id = rng.pick_warehouse_id(1, scale.num_warehouse)
    carrier_id = rng.random_number(OrderValue.MIN_CARRIER_ID, OrderValue.MAX_CARRIER_ID)
    now = clock.tick()

    min_o_id = int(
        scale.num_customer_per_district * NewOrderValue.SCALE_CONSTANT_BETWEEN_NEWORDER_ORDER + 1
    )
    max_o_id = scale.num_customer_per_district

    tx = Transaction(database)
    try:
        for d_id in range(1, scale.num_district_per_warehouse + 1):
            # The lowest outstanding order id is not searchable in the store,
            # so a candidate from the new-order range is probed instead.
            o_id = rng.random_number(min_o_id, max_o_id)
            no_key = keys.new_order_key(warehouse_id, d_id, o_id)
            pending = tx.probe(TableType.NEW_ORDER, no_key)
            if pending is None:
                continue

            order = tx.read_for_update(TableType.ORDER, keys.order_key(warehouse_id, d_id, o_id))
            _verify(pending.debug_magic == ADD_MAGIC, "new order")
            tx.delete(TableType.NEW_ORDER, no_key)

            _verify(order.o_entry_d != 0, "order")
            customer_id = order.o_c_id
            order.o_carrier_id = carrier_id

            total = 0.0
            for line_number in range(1, OrderLineValue.MAX_OL_CNT + 1):
                ol_key = keys.order_line_key(warehouse_id, d_id, o_id, line_number)
                if tx.probe(TableType.ORDER_LINE, ol_key) is None:
                    continue
                line = tx.read_for_update(TableType.ORDER_LINE, ol_key)
                _verify(line.debug_magic == ADD_MAGIC, "order line")
                line.ol_delivery_d = now
                total += line.ol_amount

            customer = tx.read_for_update(
                TableType.CUSTOMER, keys.customer_key(warehouse_id, d_id, customer_id)
            )
            _verify(customer.c_since != 0, "customer")
            customer.c_balance += total
            customer.c_delivery_cnt += 1
        return tx.commit()
    except TransactionAborted:
        return False


def order_status(database: TpccDatabase, rng: TpccRandom, clock: Clock) -> bool:
    """Run one Order-Status transaction; return whether it committed."""
    scale = database.scale
    keys = database.keys
    # Drawn to decide between lookup by name and by id; both resolve by id.
    rng.random_number(1, 100)

    warehouse_id = rng.pick_warehouse_id(1, scale.num_warehouse)
    district_id = rng.random_number(1, scale.num_district_per_warehouse)
    customer_id = rng.customer_id(scale.num_customer_per_district)

    tx = Transaction(database)
    try:
        customer = tx.read(
            TableType.CUSTOMER, keys.customer_key(warehouse_id, district_id, customer_id)
        )
        # The customer's latest order cannot be searched for; a random one is read.
        order_id = rng.random_number(1, scale.num_customer_per_district)
        order = tx.read(TableType.ORDER, keys.order_key(warehouse_id, district_id, order_id))

        _verify(customer.c_since != 0, "customer")
        _verify(order.o_entry_d != 0, "order")

        for number in range(1, order.o_ol_cnt + 1):
            tx.read(
                TableType.ORDER_LINE,
                keys.order_line_key(warehouse_id, district_id, order_id, number),
            )
        return tx.commit()
    except TransactionAborted:
        return False


def stock_level(database: TpccDatabase, rng: TpccRandom, clock: Clock) -> bool:
    """Run one Stock-Level transaction; return whether it committed.

    Counts the distinct items of the district's last orders whose stock is
    below a random threshold.
    """
    scale = database.scale
    keys = database.keys
    threshold = rng.random_number(
        StockValue.MIN_STOCK_LEVEL_THRESHOLD, StockValue.MAX_STOCK_LEVEL_THRESHOLD
    )
    warehouse_id = rng.pick_warehouse_id(1, scale.num_warehouse)
    district_id = rng.random_number(1, scale.num_district_per_warehouse)

    tx = Transaction(database)
    try:
        district = tx.read(TableType.DISTRICT, keys.district_key(warehouse_id, district_id))
        _verify(district.d_zip == ZIP_MAGIC, "district")

        next_o_id = district.d_next_o_id
        low_stock_items: set[int] = set()
        for order_id in range(next_o_id - StockValue.STOCK_LEVEL_ORDERS, next_o_id):
            for number in range(1, OrderLineValue.MAX_OL_CNT + 1):
                line = tx.probe(
                    TableType.ORDER_LINE,
                    keys.order_line_key(warehouse_id, district_id, order_id, number),
                )
                if line is None:
                    break
                _verify(line.debug_magic == ADD_MAGIC, "order line")

                stock = tx.read(TableType.STOCK, keys.stock_key(warehouse_id, line.ol_i_id))
                _verify(stock.debug_magic == ADD_MAGIC, "stock")
                if stock.s_quantity < threshold:
                    low_stock_items.add(line.ol_i_id)

        logger.debug("stock level: %d distinct items below %d", len(low_stock_items), threshold)
        return tx.commit()
    except TransactionAborted:
        return False


_PROCEDURES: dict[TxType, Callable[[TpccDatabase, TpccRandom, Clock], bool]] = {
    TxType.NEW_ORDER: new_order,
    TxType.PAYMENT: payment,
    TxType.DELIVERY: delivery,
    TxType.ORDER_STATUS: order_status,
    TxType.STOCK_LEVEL: stock_level,
}


def run_transaction(
    tx_type: TxType, database: TpccDatabase, rng: TpccRandom, clock: Clock
) -> bool:
    """Run one transaction of ``tx_type``; return whether it committed."""
    procedure = _PROCEDURES[TxType(tx_type)]
    return procedure(database, rng, clock)


def run_mix(
    database: TpccDatabase, rng: TpccRandom, clock: Clock, count: int
) -> list[tuple[TxType, bool]]:
    """Run ``count`` transactions drawn from the standard mix.

    Returns, in order, each transaction's type and whether it committed.
    """
    if count < 0:
        raise ValueError(f"transaction count must not be negative, got {count}")
    mix = workgen_array()
    outcomes: list[tuple[TxType, bool]] = []
    for _ in range(count):
        tx_type = mix[rng.next() % len(mix)]
        outcomes.append((tx_type, run_transaction(tx_type, database, rng, clock)))
    return outcomes