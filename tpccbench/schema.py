"""TPC-C table identifiers, record layouts, constants and the transaction mix."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import ClassVar

# Base identifier for TPC-C tables on a single machine.
TABLE_TPCC = 0

CUSTOMER_LAST_NAME_MAX_SIZE = 16

NAME_TOKENS: tuple[str, ...] = (
    "BAR",
    "OUGHT",
    "ABLE",
    "PRI",
    "PRES",
    "ESE",
    "ANTI",
    "CALLY",
    "ATION",
    "EING",
)

GOOD_CREDIT = "GC"
BAD_CREDIT = "BC"

DUMMY_SIZE = 12
DIST = 24
NUM_DISTRICT_PER_WAREHOUSE = 10

# Workload knobs.
UNIFORM_ITEM_DIST = False
NEW_ORDER_REMOTE_ITEM_PCT = 1

# Magic values used to sanity-check records read back from the store.
ZIP_MAGIC = "123456789"  # warehouse, district
NO_TIME_MAGIC = 0  # customer, history, order
ADD_MAGIC = 818  # customer_index, order_index, new_order, order_line, item, stock

# Stored procedure execution frequencies (percent).
FREQUENCY_NEW_ORDER = 45
FREQUENCY_PAYMENT = 43
FREQUENCY_ORDER_STATUS = 4
FREQUENCY_DELIVERY = 4
FREQUENCY_STOCK_LEVEL = 4


class Address:
    """Length limits shared by every address-bearing record."""

    MIN_STREET = 10
    MAX_STREET = 20
    MIN_CITY = 10
    MAX_CITY = 20
    STATE = 2
    ZIP = 9


class TableType(IntEnum):
    """Global identifiers of the TPC-C tables."""

    WAREHOUSE = TABLE_TPCC
    DISTRICT = TABLE_TPCC + 1
    CUSTOMER = TABLE_TPCC + 2
    HISTORY = TABLE_TPCC + 3
    NEW_ORDER = TABLE_TPCC + 4
    ORDER = TABLE_TPCC + 5
    ORDER_LINE = TABLE_TPCC + 6
    ITEM = TABLE_TPCC + 7
    STOCK = TABLE_TPCC + 8
    CUSTOMER_INDEX = TABLE_TPCC + 9
    ORDER_INDEX = TABLE_TPCC + 10


_TX_LABELS = ("NewOrder", "Payment", "Delivery", "OrderStatus", "StockLevel")


class TxType(IntEnum):
    """The five TPC-C transaction types."""

    NEW_ORDER = 0
    PAYMENT = 1
    DELIVERY = 2
    ORDER_STATUS = 3
    STOCK_LEVEL = 4

    @property
    def label(self) -> str:
        """Human-readable transaction name."""
        return _TX_LABELS[self.value]


def workgen_array() -> list[TxType]:
    """Return the 100-slot transaction mix used to draw transactions."""
    mix = (
        (TxType.NEW_ORDER, FREQUENCY_NEW_ORDER),
        (TxType.PAYMENT, FREQUENCY_PAYMENT),
        (TxType.ORDER_STATUS, FREQUENCY_ORDER_STATUS),
        (TxType.DELIVERY, FREQUENCY_DELIVERY),
        (TxType.STOCK_LEVEL, FREQUENCY_STOCK_LEVEL),
    )
    slots = [tx for tx, count in mix for _ in range(count)]
    if len(slots) != 100:
        raise ValueError("transaction frequencies must sum to 100")
    return slots


@dataclass
class WarehouseValue:
    """Warehouse record (key: w_id)."""

    MIN_NAME: ClassVar[int] = 6
    MAX_NAME: ClassVar[int] = 10
    SIZE: ClassVar[int] = 96

    w_tax: float = 0.0
    w_ytd: float = 0.0
    w_name: str = ""
    w_street_1: str = ""
    w_street_2: str = ""
    w_city: str = ""
    w_state: str = ""
    w_zip: str = ""


@dataclass
class DistrictValue:
    """District record (key: w_id, d_id)."""

    MIN_NAME: ClassVar[int] = 6
    MAX_NAME: ClassVar[int] = 10
    SIZE: ClassVar[int] = 100

    d_tax: float = 0.0
    d_ytd: float = 0.0
    d_next_o_id: int = 0
    d_name: str = ""
    d_street_1: str = ""
    d_street_2: str = ""
    d_city: str = ""
    d_state: str = ""
    d_zip: str = ""


@dataclass
class CustomerValue:
    """Customer record (key: w_id, d_id, c_id)."""

    MIN_FIRST: ClassVar[int] = 8
    MAX_FIRST: ClassVar[int] = 16
    MIDDLE: ClassVar[int] = 2
    MAX_LAST: ClassVar[int] = 16
    PHONE: ClassVar[int] = 16
    CREDIT: ClassVar[int] = 2
    MIN_DATA: ClassVar[int] = 300
    MAX_DATA: ClassVar[int] = 500
    SIZE: ClassVar[int] = 664

    c_credit_lim: float = 0.0
    c_discount: float = 0.0
    c_balance: float = 0.0
    c_ytd_payment: float = 0.0
    c_payment_cnt: int = 0
    c_delivery_cnt: int = 0
    c_first: str = ""
    c_middle: str = ""
    c_last: str = ""
    c_street_1: str = ""
    c_street_2: str = ""
    c_city: str = ""
    c_state: str = ""
    c_zip: str = ""
    c_phone: str = ""
    c_since: int = 0
    c_credit: str = ""
    c_data: str = ""


@dataclass
class CustomerIndexValue:
    """Secondary index entry mapping a customer name to its key."""

    SIZE: ClassVar[int] = 16

    c_id: int = 0
    debug_magic: int = 0


@dataclass
class HistoryValue:
    """History record (no primary key in the specification)."""

    MIN_DATA: ClassVar[int] = 12
    MAX_DATA: ClassVar[int] = 24
    SIZE: ClassVar[int] = 36

    h_amount: float = 0.0
    h_date: int = 0
    h_data: str = ""


@dataclass
class NewOrderValue:
    """New-order record (key: w_id, d_id, o_id)."""

    SCALE_CONSTANT_BETWEEN_NEWORDER_ORDER: ClassVar[float] = 0.7
    SIZE: ClassVar[int] = 24

    no_dummy: str = ""
    debug_magic: int = 0


@dataclass
class OrderValue:
    """Order record (key: w_id, d_id, o_id)."""

    MIN_CARRIER_ID: ClassVar[int] = 1
    MAX_CARRIER_ID: ClassVar[int] = 10
    SIZE: ClassVar[int] = 20

    o_c_id: int = 0
    o_carrier_id: int = 0
    o_ol_cnt: int = 0
    o_all_local: int = 0
    o_entry_d: int = 0


@dataclass
class OrderIndexValue:
    """Secondary index entry mapping a customer's order to its key."""

    SIZE: ClassVar[int] = 16

    o_id: int = 0
    debug_magic: int = 0


@dataclass
class OrderLineValue:
    """Order-line record (key: w_id, d_id, o_id, number)."""

    MIN_OL_CNT: ClassVar[int] = 5
    MAX_OL_CNT: ClassVar[int] = 15
    SIZE: ClassVar[int] = 56

    ol_i_id: int = 0
    ol_supply_w_id: int = 0
    ol_quantity: int = 0
    ol_amount: float = 0.0
    ol_delivery_d: int = 0
    ol_dist_info: str = ""
    debug_magic: int = 0


@dataclass
class ItemValue:
    """Item record (key: i_id)."""

    MIN_NAME: ClassVar[int] = 14
    MAX_NAME: ClassVar[int] = 24
    MIN_DATA: ClassVar[int] = 26
    MAX_DATA: ClassVar[int] = 50
    MIN_IM: ClassVar[int] = 1
    MAX_IM: ClassVar[int] = 10000
    SIZE: ClassVar[int] = 96

    i_im_id: int = 0
    i_price: float = 0.0
    i_name: str = ""
    i_data: str = ""
    debug_magic: int = 0


@dataclass
class StockValue:
    """Stock record (key: w_id, i_id)."""

    MIN_DATA: ClassVar[int] = 26
    MAX_DATA: ClassVar[int] = 50
    MIN_STOCK_LEVEL_THRESHOLD: ClassVar[int] = 10
    MAX_STOCK_LEVEL_THRESHOLD: ClassVar[int] = 20
    STOCK_LEVEL_ORDERS: ClassVar[int] = 20
    SIZE: ClassVar[int] = 328

    s_quantity: int = 0
    s_ytd: int = 0
    s_order_cnt: int = 0
    s_remote_cnt: int = 0
    s_dist: list[str] = field(default_factory=lambda: [""] * NUM_DISTRICT_PER_WAREHOUSE)
    s_data: str = ""
    debug_magic: int = 0