# app/api/routers/products.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, Response, status
from sqlalchemy.orm import Session

from app.data.database import get_db
from app.domain.exceptions import (
    ProductNotFoundError,
    InsufficientStockError,
    StockLimitExceededError,
    StockBusyError,
)
from app.domain.schemas import ProductIn, ProductOut, StockOut, MessageOut
from app.services.product_service import ProductService
from app.services.lock_service import LockService
from app.utils.settings import REDIS_URL, INT_MAX

router = APIRouter(prefix="/api/products", tags=["products"])


_lock_service: LockService | None = None


def get_lock_service() -> LockService | None:
    #lock w redisie tylko gdy jest skonfigurowany, jedna pula polaczen na proces
    global _lock_service
    if not REDIS_URL:
        return None
    if _lock_service is None:
        _lock_service = LockService(url=REDIS_URL)
    return _lock_service


def get_service(
    db: Session = Depends(get_db),
    lock_service: LockService | None = Depends(get_lock_service),
) -> ProductService:
    return ProductService(db=db, lock_service=lock_service)


@router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductIn,
    response: Response,
    svc: ProductService = Depends(get_service),
):
    created = svc.create_product(payload)
    response.headers["Location"] = f"{router.prefix}/{created.id}"
    return created


@router.get("", response_model=List[ProductOut])
def list_products(svc: ProductService = Depends(get_service)):
    return svc.list_products()


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, svc: ProductService = Depends(get_service)):
    try:
        return svc.get_product(product_id)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/decrement-stock/{product_id}/{quantity}", response_model=StockOut)
def decrement_stock(
    product_id: int,
    quantity: int = Path(..., ge=0, le=INT_MAX, description="Ilosc sztuk"),
    svc: ProductService = Depends(get_service),
):
    try:
        return svc.decrement_stock(product_id, quantity)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InsufficientStockError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StockBusyError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.put("/add-to-stock/{product_id}/{quantity}", response_model=StockOut)
def add_to_stock(
    product_id: int,
    quantity: int = Path(..., ge=0, le=INT_MAX, description="Ilosc sztuk"),
    svc: ProductService = Depends(get_service),
):
    try:
        return svc.add_to_stock(product_id, quantity)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StockLimitExceededError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StockBusyError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.put("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: int,
    payload: ProductIn,
    svc: ProductService = Depends(get_service),
):
    try:
        return svc.update_product(product_id, payload)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{product_id}", response_model=MessageOut)
def delete_product(product_id: int, svc: ProductService = Depends(get_service)):
    try:
        return {"message": svc.delete_product(product_id)}
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
