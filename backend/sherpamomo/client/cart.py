"""Client-side cart store.

Rows are keyed by product id and live only on the device until checkout.
Persistence goes through a ``CartStorage`` hook that is read once on
construction and written after every mutation; there is no merging across
devices, the last write wins.
"""
import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Union
from pydantic import BaseModel, Field, TypeAdapter, ValidationError
from sherpamomo.schemas.base import ProductRef
from sherpamomo.schemas.order import OrderCreate, OrderItemCreate, CustomerInfo, PaymentInfoCreate

logger = logging.getLogger(__name__)

CART_STORAGE_KEY = "sherpamomo-cart"

# Catalog ids are integers; rows are keyed by their string form
ProductId = Union[int, str]


class CartItem(BaseModel):
    id: ProductRef
    name: str
    price: Decimal
    quantity: int = Field(ge=1)
    image: Optional[str] = None
    unit: Optional[str] = None


_CART_ITEMS = TypeAdapter(List[CartItem])


class CartStorage(Protocol):
    def load(self, key: str) -> Optional[str]: ...

    def save(self, key: str, value: str) -> None: ...


class MemoryStorage:
    def __init__(self):
        self.values: Dict[str, str] = {}

    def load(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def save(self, key: str, value: str) -> None:
        self.values[key] = value


class JsonFileStorage:
    """One JSON file per key inside a directory"""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def load(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def save(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        self._path(key).write_text(value, encoding="utf-8")


class Cart:
    def __init__(self, storage: Optional[CartStorage] = None, key: str = CART_STORAGE_KEY):
        self.storage = storage or MemoryStorage()
        self.key = key
        self._items: List[CartItem] = self._load()

    # === Reads ===

    @property
    def items(self) -> List[CartItem]:
        return [item.model_copy() for item in self._items]

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self._items)

    @property
    def subtotal(self) -> Decimal:
        return sum((item.price * item.quantity for item in self._items), Decimal("0"))

    def contains(self, product_id: ProductId) -> bool:
        return self._find(product_id) is not None

    def get(self, product_id: ProductId) -> Optional[CartItem]:
        item = self._find(product_id)
        return item.model_copy() if item else None

    # === Mutations ===

    def add(self, product_id: ProductId, name: str, price: Decimal, quantity: int = 1,
            image: Optional[str] = None, unit: Optional[str] = None) -> CartItem:
        """Add a product, merging into the existing row if it is already in the cart"""
        if quantity < 1:
            raise ValueError("quantity must be at least 1")

        existing = self._find(product_id)
        if existing:
            existing.quantity += quantity
            item = existing
        else:
            item = CartItem(
                id=str(product_id),
                name=name,
                price=Decimal(str(price)),
                quantity=quantity,
                image=image,
                unit=unit,
            )
            self._items.append(item)

        self._save()
        return item.model_copy()

    def update_quantity(self, product_id: ProductId, quantity: int) -> None:
        if quantity < 1:
            self.remove(product_id)
            return
        item = self._find(product_id)
        if item:
            item.quantity = quantity
            self._save()

    def remove(self, product_id: ProductId) -> None:
        self._items = [item for item in self._items if item.id != str(product_id)]
        self._save()

    def clear(self) -> None:
        self._items = []
        self._save()

    # === Checkout ===

    def to_order_request(
        self,
        customer_info: Optional[CustomerInfo] = None,
        payment_info: Optional[PaymentInfoCreate] = None,
    ) -> OrderCreate:
        return OrderCreate(
            items=[
                OrderItemCreate(
                    product_id=item.id,
                    name=item.name,
                    price=item.price,
                    quantity=item.quantity,
                    image=item.image,
                    unit=item.unit,
                )
                for item in self._items
            ],
            customer_info=customer_info,
            payment_info=payment_info or PaymentInfoCreate(),
        )

    # === Persistence ===

    def _find(self, product_id: ProductId) -> Optional[CartItem]:
        for item in self._items:
            if item.id == str(product_id):
                return item
        return None

    def _load(self) -> List[CartItem]:
        raw = self.storage.load(self.key)
        if not raw:
            return []
        try:
            return _CART_ITEMS.validate_json(raw)
        except ValidationError:
            logger.warning("Discarding unreadable saved cart under %s", self.key)
            return []

    def _save(self) -> None:
        payload = [item.model_dump(mode="json") for item in self._items]
        self.storage.save(self.key, json.dumps(payload))
