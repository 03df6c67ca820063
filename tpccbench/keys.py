"""Encoding of TPC-C composite primary keys into single store keys."""

from __future__ import annotations

from dataclasses import dataclass

_INT32_MASK = 0xFFFFFFFF
_INT64_MASK = 0xFFFFFFFFFFFFFFFF

# Upper bound on order ids used when packing order-line keys.
MAX_ORDER_ID = 10000000
# Order-line numbers per order used when packing order-line keys.
ORDER_LINES_PER_ORDER = 15


def _int32(value: int) -> int:
    """Wrap ``value`` to a signed 32-bit integer."""
    value &= _INT32_MASK
    return value - (1 << 32) if value & 0x80000000 else value


def _int64(value: int) -> int:
    """Wrap ``value`` to a signed 64-bit integer."""
    value &= _INT64_MASK
    return value - (1 << 64) if value & (1 << 63) else value


def _name_words(name: str) -> tuple[int, int]:
    """Pack the first 16 bytes of ``name`` into two big-endian 64-bit words."""
    raw = name.encode("latin-1", errors="replace")[:16].ljust(16, b"\0")
    return int.from_bytes(raw[:8], "big"), int.from_bytes(raw[8:], "big")


@dataclass(frozen=True)
class KeyMaker:
    """Builds store keys from TPC-C column values for a given scale."""

    num_district_per_warehouse: int = 10
    num_customer_per_district: int = 3000
    num_stock_per_warehouse: int = 100000

    def _district_id(self, w_id: int, d_id: int) -> int:
        return _int32(w_id * self.num_district_per_warehouse + d_id)

    def district_key(self, w_id: int, d_id: int) -> int:
        """Key of the district ``d_id`` in warehouse ``w_id``."""
        return self._district_id(w_id, d_id)

    def customer_key(self, w_id: int, d_id: int, c_id: int) -> int:
        """Key of a customer: district id in the high word, customer id in the low."""
        upper = self._district_id(w_id, d_id)
        return _int64((upper << 32) | _int32(c_id))

    def customer_index_key(self, w_id: int, d_id: int, last: str, first: str) -> tuple[int, ...]:
        """Secondary-index key over (district, last name, first name).

        The result is a five-word composite: the district id followed by
        the first 16 bytes of each name, eight bytes to a word.
        """
        return (self._district_id(w_id, d_id), *_name_words(last), *_name_words(first))

    def history_key(self, h_w_id: int, h_d_id: int, h_c_w_id: int, h_c_d_id: int, h_c_id: int) -> int:
        """Key of a history row for a payment by a customer through a district."""
        cid = _int32(
            (h_c_w_id * self.num_district_per_warehouse + h_c_d_id) * self.num_customer_per_district + h_c_id
        )
        did = self._district_id(h_w_id, h_d_id)
        return _int64((cid << 20) | did)

    def new_order_key(self, w_id: int, d_id: int, o_id: int) -> int:
        """Key of a new-order row."""
        upper = self._district_id(w_id, d_id)
        return _int64((upper << 32) | _int32(o_id))

    def order_key(self, w_id: int, d_id: int, o_id: int) -> int:
        """Key of an order row."""
        upper = self._district_id(w_id, d_id)
        return _int64((upper << 32) | _int32(o_id))

    def order_index_key(self, w_id: int, d_id: int, c_id: int, o_id: int) -> int:
        """Key of an order-index row over (customer, order)."""
        upper = _int32(
            (w_id * self.num_district_per_warehouse + d_id) * self.num_customer_per_district + c_id
        )
        return _int64((upper << 32) | _int32(o_id))

    def order_line_key(self, w_id: int, d_id: int, o_id: int, number: int) -> int:
        """Key of line ``number`` of an order."""
        upper = self._district_id(w_id, d_id)
        oid = _int64(upper * MAX_ORDER_ID + _int32(o_id))
        return _int64(oid * ORDER_LINES_PER_ORDER + _int32(number))

    def stock_key(self, w_id: int, i_id: int) -> int:
        """Key of the stock row of item ``i_id`` in warehouse ``w_id``."""
        return _int32(i_id + w_id * self.num_stock_per_warehouse)