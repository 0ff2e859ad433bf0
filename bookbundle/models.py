from dataclasses import dataclass, field, replace
from enum import Enum

PRODUCT_URL_TEMPLATE = "https://www.aladin.co.kr/shop/wproduct.aspx?ItemId={item_id}"


class Condition(Enum):
    """Physical state of a used book, best first.

    Values are the marketplace's grade labels, which is also how conditions
    travel on the wire.
    """

    BEST = "최상"
    GOOD = "상"
    FAIR = "중"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    def is_at_least(self, minimum: "Condition") -> bool:
        return self.rank >= minimum.rank

    @classmethod
    def parse(cls, value: object) -> "Condition | None":
        """Map a wire label or member name (any case) to a Condition."""
        if isinstance(value, Condition):
            return value
        if not isinstance(value, str):
            return None
        text = value.strip()
        for member in cls:
            if text == member.value or text.upper() == member.name:
                return member
        return None


_RANKS = {Condition.BEST: 3, Condition.GOOD: 2, Condition.FAIR: 1}

# Unannotated listings are assumed to be in the middle grade.
DEFAULT_CONDITION = Condition.GOOD


def product_url(item_id: int) -> str:
    return PRODUCT_URL_TEMPLATE.format(item_id=item_id)


@dataclass
class BookRecord:
    """One listing as captured from the marketplace cart."""

    item_id: int
    title: str
    condition: Condition = DEFAULT_CONDITION
    unit_price: int = 0
    quantity: int = 1
    cover_url: str | None = None
    product_url: str = ""

    def __post_init__(self):
        if not self.product_url:
            self.product_url = product_url(self.item_id)

    def to_wire(self) -> dict:
        return {
            "itemId": self.item_id,
            "title": self.title,
            "quality": self.condition.value,
            "price": self.unit_price,
            "qty": self.quantity,
            "cover": self.cover_url or "",
            "minQuality": self.condition.value,
            "productUrl": self.product_url,
        }


@dataclass
class SearchResult:
    """A title returned by the search service."""

    item_id: int
    title: str
    isbn13: str | None = None
    author: str | None = None
    publisher: str | None = None
    pub_date: str | None = None
    cover: str | None = None
    price_standard: int | None = None
    price_sales: int | None = None
    used_count: int | None = None
    used_min_price: int | None = None

    @classmethod
    def from_json(cls, data: dict) -> "SearchResult":
        return cls(
            item_id=_require_int(data, "itemId"),
            title=_require_str(data, "title"),
            isbn13=data.get("isbn13"),
            author=data.get("author"),
            publisher=data.get("publisher"),
            pub_date=data.get("pubDate"),
            cover=data.get("cover"),
            price_standard=data.get("priceStandard"),
            price_sales=data.get("priceSales"),
            used_count=data.get("usedCount"),
            used_min_price=data.get("usedMinPrice"),
        )


@dataclass
class SelectedBook:
    """A wishlist entry: a captured or searched book plus the minimum
    condition the shopper will accept for it."""

    item_id: int
    title: str
    min_condition: Condition = DEFAULT_CONDITION
    condition: Condition | None = None
    unit_price: int | None = None
    quantity: int = 1
    cover_url: str | None = None
    product_url: str = ""
    isbn13: str | None = None
    author: str | None = None

    def __post_init__(self):
        if not self.product_url:
            self.product_url = product_url(self.item_id)

    @classmethod
    def from_record(
        cls, record: BookRecord, min_condition: Condition | None = None
    ) -> "SelectedBook":
        return cls(
            item_id=record.item_id,
            title=record.title,
            min_condition=min_condition or record.condition,
            condition=record.condition,
            unit_price=record.unit_price,
            quantity=record.quantity,
            cover_url=record.cover_url,
            product_url=record.product_url,
        )

    @classmethod
    def from_search(
        cls, result: SearchResult, min_condition: Condition = DEFAULT_CONDITION
    ) -> "SelectedBook":
        return cls(
            item_id=result.item_id,
            title=result.title,
            min_condition=min_condition,
            unit_price=result.price_standard,
            cover_url=result.cover,
            isbn13=result.isbn13,
            author=result.author,
        )

    def copy(self) -> "SelectedBook":
        return replace(self)

    def to_payload(self) -> dict:
        """Shape expected by the bundle analysis service."""
        payload = {
            "itemId": self.item_id,
            "isbn13": self.isbn13,
            "title": self.title,
            "author": self.author,
            "cover": self.cover_url or None,
            "priceStandard": self.unit_price,
            "minQuality": self.min_condition.value,
        }
        return {k: v for k, v in payload.items() if v is not None}


@dataclass
class SellerBook:
    item_id: int
    title: str
    quality: str | None = None
    price: int | None = None
    product_url: str | None = None

    @classmethod
    def from_json(cls, data: dict) -> "SellerBook":
        return cls(
            item_id=_require_int(data, "itemId"),
            title=_require_str(data, "title"),
            quality=data.get("quality"),
            price=data.get("price"),
            product_url=data.get("productUrl"),
        )


@dataclass
class SellerInfo:
    seller_code: str
    seller_name: str
    shop_url: str
    total_book_count: int
    total_price: int
    seller_type: str | None = None
    books: list[SellerBook] = field(default_factory=list)
    satisfaction_rate: float | None = None
    shipping_fee: int | None = None
    free_shipping_threshold: int | None = None

    @classmethod
    def from_json(cls, data: dict) -> "SellerInfo":
        return cls(
            seller_code=str(data["sellerCode"]),
            seller_name=_require_str(data, "sellerName"),
            shop_url=_require_str(data, "shopUrl"),
            total_book_count=_require_int(data, "totalBookCount"),
            total_price=_require_int(data, "totalPrice"),
            seller_type=data.get("sellerType"),
            books=[SellerBook.from_json(b) for b in _require_list(data, "books")],
            satisfaction_rate=data.get("satisfactionRate"),
            shipping_fee=data.get("shippingFee"),
            free_shipping_threshold=data.get("freeShippingThreshold"),
        )

    def is_complete(self, total_requested: int) -> bool:
        return total_requested > 0 and self.total_book_count >= total_requested

    def coverage(self, total_requested: int) -> float:
        if total_requested <= 0:
            return 0.0
        return self.total_book_count / total_requested


@dataclass
class BundleResult:
    """Analysis response, kept in the order the service returned it."""

    requested_books: list[dict]
    total_requested_count: int
    sellers: list[SellerInfo]
    has_complete_seller: bool
    analysis_time_ms: int

    @classmethod
    def from_json(cls, data: dict) -> "BundleResult":
        if not isinstance(data, dict):
            raise TypeError(f"expected an object, got {type(data).__name__}")
        has_complete = data["hasCompleteSeller"]
        if not isinstance(has_complete, bool):
            raise TypeError("hasCompleteSeller must be a boolean")
        return cls(
            requested_books=list(data.get("requestedBooks") or []),
            total_requested_count=_require_int(data, "totalRequestedCount"),
            sellers=[SellerInfo.from_json(s) for s in _require_list(data, "sellers")],
            has_complete_seller=has_complete,
            analysis_time_ms=_require_int(data, "analysisTimeMs"),
        )


def _require_int(data: dict, key: str) -> int:
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{key} must be an integer, got {value!r}")
    return value


def _require_str(data: dict, key: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise TypeError(f"{key} must be a string, got {value!r}")
    return value


def _require_list(data: dict, key: str) -> list:
    value = data[key]
    if not isinstance(value, list):
        raise TypeError(f"{key} must be a list, got {type(value).__name__}")
    return value
