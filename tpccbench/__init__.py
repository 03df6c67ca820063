"""In-memory TPC-C style workload: schema, keys, population, placement and transactions."""

__version__ = "0.1.0"