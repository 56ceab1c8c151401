from decimal import Decimal

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from app.domain.exceptions import (
    InsufficientStockError,
    ProductNotFoundError,
    StockBusyError,
)
from app.domain.schemas import ProductIn
from app.services.product_service import ProductService


class DummyLockService:
    def __init__(self, grant: bool = True):
        self.grant = grant
        self.acquired = []
        self.released = []

    def acquire_stock_lock(self, product_id: int):
        if not self.grant:
            return None
        self.acquired.append(product_id)
        return f"token-{product_id}"

    def release_stock_lock(self, product_id: int, token: str) -> bool:
        self.released.append((product_id, token))
        return True


class FailingReleaseLockService(DummyLockService):
    def release_stock_lock(self, product_id: int, token: str) -> bool:
        self.released.append((product_id, token))
        raise RedisConnectionError("connection lost")


def _payload(**overrides):
    data = {"name": "Widget", "price": Decimal("9.99"), "quantity": 5, "stock_available": 5}
    data.update(overrides)
    return ProductIn(**data)


def test_create_assigns_id_and_timestamp(db):
    svc = ProductService(db)

    created = svc.create_product(_payload())

    assert created.id >= 100000
    assert created.added_at is not None
    assert created.price == Decimal("9.99")


def test_get_missing_product_raises(db):
    with pytest.raises(ProductNotFoundError) as exc:
        ProductService(db).get_product(42)

    assert exc.value.product_id == 42
    assert str(exc.value) == "Product with ID 42 not found."


def test_insufficient_stock_keeps_stored_value(db):
    svc = ProductService(db)
    product_id = svc.create_product(_payload(stock_available=3)).id

    with pytest.raises(InsufficientStockError) as exc:
        svc.decrement_stock(product_id, 4)

    assert exc.value.available == 3
    assert svc.get_product(product_id).stock_available == 3


def test_stock_lock_wraps_adjustments(db):
    lock = DummyLockService()
    svc = ProductService(db, lock_service=lock)
    product_id = svc.create_product(_payload()).id

    svc.decrement_stock(product_id, 2)
    svc.add_to_stock(product_id, 1)

    assert lock.acquired == [product_id, product_id]
    assert lock.released == [(product_id, f"token-{product_id}")] * 2
    assert svc.get_product(product_id).stock_available == 4


def test_stock_lock_released_on_failure(db):
    lock = DummyLockService()
    svc = ProductService(db, lock_service=lock)
    product_id = svc.create_product(_payload(stock_available=0)).id

    with pytest.raises(InsufficientStockError):
        svc.decrement_stock(product_id, 1)

    assert lock.released == [(product_id, f"token-{product_id}")]


def test_busy_lock_raises_and_leaves_stock(db):
    svc = ProductService(db, lock_service=DummyLockService(grant=False))
    product_id = svc.create_product(_payload()).id

    with pytest.raises(StockBusyError):
        svc.add_to_stock(product_id, 10)

    assert svc.get_product(product_id).stock_available == 5


def test_busy_lock_maps_to_conflict(client, create_product):
    from app.api.routers.products import get_lock_service
    from app.main import app

    product_id = create_product()["id"]
    app.dependency_overrides[get_lock_service] = lambda: DummyLockService(grant=False)

    resp = client.put(f"/api/products/decrement-stock/{product_id}/1")

    assert resp.status_code == 409


def test_failed_release_keeps_committed_decrement(client, create_product):
    from app.api.routers.products import get_lock_service
    from app.main import app

    product_id = create_product(stockAvailable=5)["id"]
    lock = FailingReleaseLockService()
    app.dependency_overrides[get_lock_service] = lambda: lock

    resp = client.put(f"/api/products/decrement-stock/{product_id}/2")

    assert resp.status_code == 200
    assert resp.json()["stockAvailable"] == 3
    assert lock.released == [(product_id, f"token-{product_id}")]
    assert client.get(f"/api/products/{product_id}").json()["stockAvailable"] == 3


def test_failed_release_keeps_domain_errors(client, create_product):
    from app.api.routers.products import get_lock_service
    from app.main import app

    product_id = create_product(stockAvailable=0)["id"]
    app.dependency_overrides[get_lock_service] = lambda: FailingReleaseLockService()

    assert client.put(f"/api/products/decrement-stock/{product_id}/1").status_code == 400
    assert client.put(f"/api/products/add-to-stock/{product_id + 1000}/1").status_code == 404


def test_lock_service_is_shared_between_requests(monkeypatch):
    from app.api.routers import products

    monkeypatch.setattr(products, "REDIS_URL", "redis://localhost:6379/0")
    monkeypatch.setattr(products, "_lock_service", None)

    first = products.get_lock_service()

    assert first is not None
    assert products.get_lock_service() is first


def test_no_lock_service_without_redis(monkeypatch):
    from app.api.routers import products

    monkeypatch.setattr(products, "REDIS_URL", "")

    assert products.get_lock_service() is None
