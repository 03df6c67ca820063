from collections import Counter

import pytest

from tpccbench.schema import (
    ADD_MAGIC,
    FREQUENCY_DELIVERY,
    FREQUENCY_NEW_ORDER,
    FREQUENCY_ORDER_STATUS,
    FREQUENCY_PAYMENT,
    FREQUENCY_STOCK_LEVEL,
    NUM_DISTRICT_PER_WAREHOUSE,
    CustomerValue,
    DistrictValue,
    ItemValue,
    NewOrderValue,
    OrderLineValue,
    StockValue,
    TableType,
    TxType,
    WarehouseValue,
    workgen_array,
)


def test_workgen_array_has_one_hundred_slots():
    assert len(workgen_array()) == 100


def test_workgen_array_counts_match_frequencies():
    counts = Counter(workgen_array())
    assert counts[TxType.NEW_ORDER] == FREQUENCY_NEW_ORDER
    assert counts[TxType.PAYMENT] == FREQUENCY_PAYMENT
    assert counts[TxType.ORDER_STATUS] == FREQUENCY_ORDER_STATUS
    assert counts[TxType.DELIVERY] == FREQUENCY_DELIVERY
    assert counts[TxType.STOCK_LEVEL] == FREQUENCY_STOCK_LEVEL


def test_workgen_array_order_of_blocks():
    slots = workgen_array()
    assert slots[0] is TxType.NEW_ORDER
    assert slots[FREQUENCY_NEW_ORDER] is TxType.PAYMENT
    start = FREQUENCY_NEW_ORDER + FREQUENCY_PAYMENT
    assert slots[start] is TxType.ORDER_STATUS
    assert slots[start + FREQUENCY_ORDER_STATUS] is TxType.DELIVERY
    assert slots[-1] is TxType.STOCK_LEVEL


def test_workgen_array_returns_fresh_list():
    first = workgen_array()
    first.clear()
    assert len(workgen_array()) == 100


def test_table_type_numbering():
    assert TableType(0) is TableType.WAREHOUSE
    assert [TableType(int(t)) for t in TableType] == list(TableType)
    assert [int(t) for t in TableType] == list(range(len(TableType)))
    assert TableType(len(TableType) - 1) is TableType.ORDER_INDEX
    with pytest.raises(ValueError):
        TableType(len(TableType))


@pytest.mark.parametrize(
    "tx, label",
    [
        (TxType.NEW_ORDER, "NewOrder"),
        (TxType.PAYMENT, "Payment"),
        (TxType.DELIVERY, "Delivery"),
        (TxType.ORDER_STATUS, "OrderStatus"),
        (TxType.STOCK_LEVEL, "StockLevel"),
    ],
)
def test_tx_labels(tx, label):
    assert tx.label == label


def test_record_sizes_from_layout():
    stock = StockValue()
    assert stock.SIZE == 328
    assert WarehouseValue.SIZE == 96
    assert DistrictValue.SIZE == 100
    assert CustomerValue.SIZE == 664


def test_stock_dist_default_is_per_instance():
    first = StockValue()
    second = StockValue()
    first.s_dist[0] = "changed"
    assert len(second.s_dist) == NUM_DISTRICT_PER_WAREHOUSE
    assert second.s_dist[0] == ""


def test_records_are_mutable_and_compare_by_value():
    line = OrderLineValue(ol_i_id=3, debug_magic=ADD_MAGIC)
    line.ol_quantity = 5
    assert line == OrderLineValue(ol_i_id=3, ol_quantity=5, debug_magic=ADD_MAGIC)


def test_class_limits():
    line = OrderLineValue()
    assert line.MIN_OL_CNT == 5
    assert line.MAX_OL_CNT == 15
    assert ItemValue.MIN_DATA <= ItemValue.MAX_DATA
    assert NewOrderValue.SCALE_CONSTANT_BETWEEN_NEWORDER_ORDER == 0.7