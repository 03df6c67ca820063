from collections import Counter

import pytest

from tpccbench.config import ScaleConfig
from tpccbench.database import Table, TpccDatabase
from tpccbench.schema import (
    ADD_MAGIC,
    ZIP_MAGIC,
    Address,
    CustomerValue,
    DistrictValue,
    HistoryValue,
    ItemValue,
    StockValue,
    TableType,
    WarehouseValue,
)
from tpccbench.tpccrandom import customer_last_name

SMALL = ScaleConfig(
    num_warehouse=2,
    num_district_per_warehouse=3,
    num_customer_per_district=20,
    num_item=40,
    num_stock_per_warehouse=40,
)


def make_db(*table_types):
    db = TpccDatabase(SMALL)
    for table_type in table_types:
        db.create_table(table_type, 100)
    return db


def test_table_insert_get_delete():
    table = Table(TableType.ITEM, 10)
    table.insert(5, "five")
    assert table.get(5) == "five"
    assert 5 in table
    assert len(table) == 1
    assert table.delete(5) == "five"
    assert table.get(5) is None
    assert len(table) == 0


def test_table_delete_missing_raises():
    table = Table(TableType.ITEM, 10)
    with pytest.raises(KeyError):
        table.delete(1)


def test_table_negative_buckets_rejected():
    with pytest.raises(ValueError):
        Table(TableType.ITEM, -1)


def test_missing_table_raises():
    db = TpccDatabase(SMALL)
    with pytest.raises(KeyError):
        db.table(TableType.WAREHOUSE)
    with pytest.raises(KeyError):
        db.populate_warehouse(1)


def test_load_and_get_record_round_trip():
    db = make_db(TableType.ITEM)
    value = ItemValue(i_price=3.5)
    db.load_record(TableType.ITEM, 7, value)
    assert db.get_record(TableType.ITEM, 7) is value
    assert db.get_record(TableType.ITEM, 8) is None
    assert db.table(TableType.ITEM).table_type == TableType.ITEM


def test_populate_warehouse():
    db = make_db(TableType.WAREHOUSE)
    assert db.populate_warehouse(9324) == SMALL.num_warehouse
    table = db.table(TableType.WAREHOUSE)
    assert sorted(table) == [1, 2]
    for value in table.values():
        assert value.w_zip == ZIP_MAGIC
        assert value.w_ytd == 300000 * 100
        assert 0.0 <= value.w_tax <= 0.2
        assert len(value.w_state) == Address.STATE
        assert WarehouseValue.MIN_NAME <= len(value.w_name) <= WarehouseValue.MAX_NAME
        assert Address.MIN_CITY <= len(value.w_city) <= Address.MAX_CITY
        assert value.w_name.isalnum()


def test_populate_district():
    db = make_db(TableType.DISTRICT)
    assert db.populate_district(129856349) == 6
    for w_id in range(1, 3):
        for d_id in range(1, 4):
            value = db.get_record(TableType.DISTRICT, db.keys.district_key(w_id, d_id))
            assert value.d_zip == ZIP_MAGIC
            assert value.d_next_o_id == SMALL.num_customer_per_district + 1
            assert value.d_ytd == 30000 * 100
            assert DistrictValue.MIN_NAME <= len(value.d_name) <= DistrictValue.MAX_NAME


def test_populate_is_deterministic():
    first = make_db(TableType.WAREHOUSE)
    second = make_db(TableType.WAREHOUSE)
    first.populate_warehouse(42)
    second.populate_warehouse(42)
    assert first.get_record(TableType.WAREHOUSE, 1) == second.get_record(TableType.WAREHOUSE, 1)
    assert first.get_record(TableType.WAREHOUSE, 2) == second.get_record(TableType.WAREHOUSE, 2)


def test_populate_customer_and_history():
    db = make_db(TableType.CUSTOMER, TableType.CUSTOMER_INDEX, TableType.HISTORY)
    counts = db.populate_customer_and_history(923587856425)
    total = 2 * 3 * 20
    assert counts[TableType.CUSTOMER] == total
    assert counts[TableType.HISTORY] == total
    assert len(db.table(TableType.CUSTOMER)) == total
    assert len(db.table(TableType.HISTORY)) == total

    since = []
    for w_id in range(1, 3):
        for d_id in range(1, 4):
            for c_id in range(1, 21):
                customer = db.get_record(TableType.CUSTOMER, db.keys.customer_key(w_id, d_id, c_id))
                assert customer.c_credit in ("BC", "GC")
                assert customer.c_middle == "OE"
                assert customer.c_balance == -10
                assert customer.c_payment_cnt == 1
                assert customer.c_zip.endswith("11111") and len(customer.c_zip) == 9
                assert len(customer.c_phone) == CustomerValue.PHONE and customer.c_phone.isdigit()
                assert CustomerValue.MIN_DATA <= len(customer.c_data) <= CustomerValue.MAX_DATA
                if c_id <= 20 // 3:
                    assert customer.c_last == customer_last_name(c_id - 1)
                since.append(customer.c_since)
                history = db.get_record(
                    TableType.HISTORY, db.keys.history_key(w_id, d_id, w_id, d_id, c_id)
                )
                assert history.h_amount == 10
                assert HistoryValue.MIN_DATA <= len(history.h_data) <= HistoryValue.MAX_DATA
    assert len(set(since)) == len(since)
    assert all(s > 0 for s in since)

    index = db.table(TableType.CUSTOMER_INDEX)
    assert len(index) == counts[TableType.CUSTOMER_INDEX]
    for key, entry in index.items():
        customer = db.get_record(TableType.CUSTOMER, entry.c_id)
        assert entry.debug_magic == ADD_MAGIC
        assert key == db.keys.customer_index_key(
            (entry.c_id >> 32) // 3 if False else key[0] // 3, key[0] % 3 or 3, customer.c_last, customer.c_first
        ) or key[1:] == db.keys.customer_index_key(0, 0, customer.c_last, customer.c_first)[1:]


def test_populate_items():
    db = make_db(TableType.ITEM)
    assert db.populate_items(235443) == SMALL.num_item
    for i_id in range(1, SMALL.num_item + 1):
        item = db.get_record(TableType.ITEM, i_id)
        assert 1.0 <= item.i_price <= 100.0
        assert ItemValue.MIN_DATA <= len(item.i_data) <= ItemValue.MAX_DATA
        assert ItemValue.MIN_NAME <= len(item.i_name) <= ItemValue.MAX_NAME
        assert ItemValue.MIN_IM <= item.i_im_id <= ItemValue.MAX_IM
        assert item.debug_magic == ADD_MAGIC


def test_populate_stock_rows_share_seed():
    db = make_db(TableType.STOCK)
    assert db.populate_stock(89785943) == SMALL.num_warehouse * SMALL.num_item
    rows = list(db.table(TableType.STOCK).values())
    assert len(rows) == SMALL.num_warehouse * SMALL.num_item
    first = rows[0]
    assert all(row == first for row in rows)
    assert 10 <= first.s_quantity <= 100
    assert StockValue.MIN_DATA <= len(first.s_data) <= StockValue.MAX_DATA
    assert first.debug_magic == ADD_MAGIC
    assert Counter(db.keys.stock_key(w, i) for w in (1, 2) for i in range(1, 41)).most_common(1)[0][1] == 1