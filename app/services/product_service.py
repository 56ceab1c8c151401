# app/services/product_service.py
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import List

from redis.exceptions import RedisError
from sqlalchemy.orm import Session

from app.data.models.product import ProductModel
from app.domain.exceptions import (
    ProductNotFoundError,
    InsufficientStockError,
    StockLimitExceededError,
    StockBusyError,
)
from app.domain.schemas import ProductIn, ProductOut, StockOut
from app.repos.product_repo import ProductRepo
from app.services.lock_service import LockService
from app.utils.settings import INT_MAX
from app.utils.logging import get_logger

logger = get_logger(__name__)


class ProductService:
    """
    Use case'y dla domeny produktu
    commands (create, update, delete, decrement, add) modyfikuja stan
    query (list, get) tylko odczyt
    """

    def __init__(self, db: Session, lock_service: LockService | None = None):
        self.repo = ProductRepo(db)
        self.lock_service = lock_service

    #query - odczyt
    def list_products(self) -> List[ProductOut]:
        return [ProductOut.model_validate(p) for p in self.repo.list_products()]

    def get_product(self, product_id: int) -> ProductOut:
        product = self.repo.get_product(product_id)
        if not product:
            raise ProductNotFoundError(product_id)
        return ProductOut.model_validate(product)

    #commands
    def create_product(self, payload: ProductIn) -> ProductOut:
        #id i added_at zawsze nadaje serwer
        product = ProductModel(
            name=payload.name,
            price=payload.price,
            quantity=payload.quantity,
            stock_available=payload.stock_available,
            added_at=datetime.now(timezone.utc),
        )
        created = self.repo.create_product(product)

        logger.info(f"Utworzono produkt {created.id} ({created.name})")
        return ProductOut.model_validate(created)

    def update_product(self, product_id: int, payload: ProductIn) -> ProductOut:
        product = self.repo.get_product(product_id)
        if not product:
            raise ProductNotFoundError(product_id)

        #pelna podmiana pol, timestamp odswiezony
        product.name = payload.name
        product.price = payload.price
        product.quantity = payload.quantity
        product.stock_available = payload.stock_available
        product.added_at = datetime.now(timezone.utc)

        self.repo.commit()
        self.repo.refresh(product)

        logger.info(f"Zaktualizowano produkt {product_id}")
        return ProductOut.model_validate(product)

    def delete_product(self, product_id: int) -> str:
        product = self.repo.get_product(product_id)
        if not product:
            raise ProductNotFoundError(product_id)

        self.repo.delete_product(product)

        logger.info(f"Usunieto produkt {product_id}")
        return f"Product with ID {product_id} deleted."

    def decrement_stock(self, product_id: int, quantity: int) -> StockOut:
        with self._stock_lock(product_id):
            product = self.repo.get_product_for_update(product_id)
            if not product:
                self.repo.rollback()
                raise ProductNotFoundError(product_id)

            if product.stock_available < quantity:
                available = product.stock_available
                self.repo.rollback()
                logger.warning(
                    f"Za malo towaru dla produktu {product_id}: "
                    f"zadano {quantity}, dostepne {available}"
                )
                raise InsufficientStockError(product_id, quantity, available)

            product.stock_available -= quantity
            stock = product.stock_available
            self.repo.commit()

        logger.info(f"Produkt {product_id}: stan zmniejszony o {quantity}, teraz {stock}")
        return StockOut(id=product_id, stock_available=stock, message="Stock decremented.")

    def add_to_stock(self, product_id: int, quantity: int) -> StockOut:
        with self._stock_lock(product_id):
            product = self.repo.get_product_for_update(product_id)
            if not product:
                self.repo.rollback()
                raise ProductNotFoundError(product_id)

            if product.stock_available + quantity > INT_MAX:
                self.repo.rollback()
                logger.warning(f"Stan produktu {product_id} przekroczylby {INT_MAX}")
                raise StockLimitExceededError(product_id, INT_MAX)

            product.stock_available += quantity
            stock = product.stock_available
            self.repo.commit()

        logger.info(f"Produkt {product_id}: stan zwiekszony o {quantity}, teraz {stock}")
        return StockOut(id=product_id, stock_available=stock, message="Stock added.")

    @contextmanager
    def _stock_lock(self, product_id: int):
        # bez redisa wystarcza blokada wiersza w bazie
        if self.lock_service is None:
            yield
            return

        token = self.lock_service.acquire_stock_lock(product_id)
        if token is None:
            raise StockBusyError(product_id)

        try:
            yield
        finally:
            try:
                self.lock_service.release_stock_lock(product_id, token)
            except RedisError as e:
                #klucz i tak wygasnie po TTL, zmiana stanu juz zapisana
                logger.warning(f"Nie udalo sie zwolnic locka produktu {product_id}: {e}")
