from datetime import datetime

from models import db, money_column, new_id


class Category(db.Model):
    __tablename__ = "category"

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    brand_id = db.Column(db.String(32), db.ForeignKey("brand.id"), nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False)


class Product(db.Model):
    __tablename__ = "product"
    __table_args__ = (
        db.Index("ix_product_brand_category", "brand_id", "category_id"),
    )

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    brand_id = db.Column(db.String(32), db.ForeignKey("brand.id"), nullable=False)
    category_id = db.Column(db.String(32), db.ForeignKey("category.id"), nullable=True)
    name = db.Column(db.String(100), nullable=False)
    price = money_column(nullable=False)                 # pickup price
    price_delivery = money_column(nullable=True)         # falls back to price
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def price_for(self, delivery_type: str):
        if delivery_type == "delivery" and self.price_delivery is not None:
            return self.price_delivery
        return self.price


class Combo(db.Model):
    __tablename__ = "combo"

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    brand_id = db.Column(db.String(32), db.ForeignKey("brand.id"), nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False)
    price_pickup = money_column(nullable=False)
    price_delivery = money_column(nullable=True)
    is_active = db.Column(db.Boolean, default=True)

    def price_for(self, delivery_type: str):
        if delivery_type == "delivery" and self.price_delivery is not None:
            return self.price_delivery
        return self.price_pickup
