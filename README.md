# tpccbench

An in-memory TPC-C style workload for experimenting with transaction
processing. It provides:

- the table identifiers, record types and constants (`tpccbench.schema`),
  including `TableType`, `TxType` and the 100-slot transaction mix
  `workgen_array()`;
- scale settings read from per-table JSON files (`tpccbench.config.ScaleConfig`,
  `load_bucket_count`);
- the key encodings for every table (`tpccbench.keys.KeyMaker`);
- seeded random generators for data and transaction parameters
  (`tpccbench.tpccrandom.TpccRandom`) and a logical clock (`Clock`);
- an in-memory database of `Table` objects with loaders for all eleven tables
  (`tpccbench.database.TpccDatabase`);
- primary/backup placement of table groups across servers
  (`tpccbench.placement.groups_for_node`, `load_tables`);
- buffered transactions (`tpccbench.transaction.Transaction`) and the
  NewOrder and Payment profiles (`new_order`, `payment`), with Delivery,
  OrderStatus and StockLevel in `tpccbench.procedures` (`delivery`,
  `order_status`, `stock_level`, `run_transaction`, `run_mix`).

## Installing

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Scale configuration

Each table's size is taken from a JSON file whose `table.bkt_num` field holds
a non-negative integer, for example `warehouse.json`:

```json
{"table": {"bkt_num": 1}}
```

`load_bucket_count(path)` reads a single file and raises `ValueError` when the
field is missing or not a non-negative integer. A directory holding
`warehouse.json`, `district.json`, `customer.json`, `item.json` and
`stock.json` is read with `ScaleConfig.from_directory(directory)`.

A `ScaleConfig()` built without arguments uses the full standard scale
(3000 warehouses, 100000 items), which is far too large to populate in
memory; pass a small configuration for experiments.

## Using it

```python
from tpccbench.config import ScaleConfig
from tpccbench.database import TpccDatabase
from tpccbench.placement import load_tables
from tpccbench.procedures import run_mix
from tpccbench.tpccrandom import Clock, TpccRandom

scale = ScaleConfig(
    num_warehouse=2,
    num_district_per_warehouse=2,
    num_customer_per_district=30,
    num_item=100,
    num_stock_per_warehouse=100,
)
database = TpccDatabase(scale)

# Create and fill every table group this node holds, as primary and backup.
primary_tables, backup_tables = load_tables(
    database, node_id=0, num_server=1, backup_degree=0
)

rng = TpccRandom(12345)
clock = Clock()
outcomes = run_mix(database, rng, clock, 1000)
committed = sum(ok for _, ok in outcomes)
```

`run_mix` draws each transaction from the standard mix (45% NewOrder,
43% Payment, 4% each of OrderStatus, Delivery and StockLevel) and returns a
list of `(TxType, committed)` pairs. A single transaction is run with
`run_transaction(tx_type, database, rng, clock)`.

Each procedure returns `True` when it commits and `False` when a record it
needs is missing (the `Transaction` raises `TransactionAborted`, which the
procedure catches). Writes are buffered in the `Transaction` and applied to
the tables only on `commit()`.

## What it does not do

- Tables live in memory only; nothing is stored on disk.
- There is no network layer: `load_tables` decides which table groups a node
  would hold, but nodes do not talk to one another, and there is no
  concurrency control between transactions.
- There is no command-line program; the package is used as a library.
- Lookups by customer last name and searches for a customer's latest or a
  district's oldest outstanding order are not supported by the key-value
  tables. Payment and OrderStatus resolve the customer by id, OrderStatus
  reads a random order, and Delivery probes a random order id from the
  new-order range.