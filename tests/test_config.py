import json

import pytest

from tpccbench.config import ScaleConfig, load_bucket_count


def _write(path, document):
    path.write_text(json.dumps(document), encoding="utf-8")
    return path


def test_load_bucket_count_reads_value(tmp_path):
    path = _write(tmp_path / "t.json", {"table": {"bkt_num": 7}})
    assert load_bucket_count(path) == 7


def test_load_bucket_count_accepts_str_path(tmp_path):
    path = _write(tmp_path / "t.json", {"table": {"bkt_num": 12, "other": 1}})
    assert load_bucket_count(str(path)) == 12


@pytest.mark.parametrize(
    "document",
    [
        {},
        {"table": 3},
        {"table": {}},
        {"table": {"bkt_num": -1}},
        {"table": {"bkt_num": 1.5}},
        {"table": {"bkt_num": "10"}},
        {"table": {"bkt_num": True}},
        [1, 2],
    ],
)
def test_load_bucket_count_rejects_bad_documents(tmp_path, document):
    path = _write(tmp_path / "t.json", document)
    with pytest.raises(ValueError):
        load_bucket_count(path)


def test_load_bucket_count_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_bucket_count(tmp_path / "absent.json")


def test_default_scale():
    config = ScaleConfig()
    assert config.num_warehouse == 3000
    assert config.num_district_per_warehouse == 10
    assert config.num_customer_per_district == 3000
    assert config.num_item == 100000
    assert config.num_stock_per_warehouse == 100000


def test_from_directory_round_trip(tmp_path):
    expected = ScaleConfig(
        num_warehouse=2,
        num_district_per_warehouse=3,
        num_customer_per_district=30,
        num_item=50,
        num_stock_per_warehouse=50,
    )
    for name, value in [
        ("warehouse", expected.num_warehouse),
        ("district", expected.num_district_per_warehouse),
        ("customer", expected.num_customer_per_district),
        ("item", expected.num_item),
        ("stock", expected.num_stock_per_warehouse),
    ]:
        _write(tmp_path / f"{name}.json", {"table": {"bkt_num": value}})
    assert ScaleConfig.from_directory(tmp_path) == expected


def test_from_directory_missing_table_file(tmp_path):
    for name in ("warehouse", "district", "customer", "item"):
        _write(tmp_path / f"{name}.json", {"table": {"bkt_num": 1}})
    with pytest.raises(FileNotFoundError):
        ScaleConfig.from_directory(tmp_path)