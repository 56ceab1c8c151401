# app/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, field_serializer
from decimal import Decimal
from datetime import datetime

from app.utils.settings import INT_MAX


class ProductIn(BaseModel):
    """Schema dla tworzenia i pelnej aktualizacji produktu."""

    name: str = Field(..., min_length=1, max_length=255, description="Nazwa produktu")
    price: Decimal = Field(..., ge=0, max_digits=18, decimal_places=2, description="Cena (>= 0)")
    quantity: int = Field(0, ge=0, le=INT_MAX, description="Ilosc nominalna")
    stock_available: int = Field(
        0, ge=0, le=INT_MAX, alias="stockAvailable", description="Ilosc dostepna do sprzedazy"
    )

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)


class ProductOut(BaseModel):
    """Schema dla produktu (response)."""

    id: int
    name: str
    price: Decimal
    quantity: int
    stock_available: int = Field(..., alias="stockAvailable")
    added_at: datetime | None = Field(None, alias="addedAt")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    #cena w JSON jako liczba, nie string
    @field_serializer("price", when_used="json")
    def serialize_price(self, price: Decimal) -> float:
        return float(price)


class StockOut(BaseModel):
    """Schema dla wyniku zmiany stanu magazynowego."""

    id: int
    stock_available: int = Field(..., alias="stockAvailable")
    message: str

    model_config = ConfigDict(populate_by_name=True)


class MessageOut(BaseModel):
    message: str
