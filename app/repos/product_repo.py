# app/repos/product_repo.py
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.data.models.product import ProductModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def list_products(self) -> List[ProductModel]:
        return list(
            self.db.execute(select(ProductModel).order_by(ProductModel.id)).scalars().all()
        )

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def get_product_for_update(self, product_id: int) -> ProductModel | None:
        #SELECT ... FOR UPDATE, blokada wiersza do konca transakcji
        return self.db.execute(
            select(ProductModel).where(ProductModel.id == product_id).with_for_update()
        ).scalar_one_or_none()

    def create_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete_product(self, product: ProductModel) -> None:
        self.db.delete(product)
        self.db.commit()

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()

    def refresh(self, product: ProductModel) -> ProductModel:
        self.db.refresh(product)
        return product
