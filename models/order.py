from datetime import datetime

from models import BIGINT, db, money_column, new_id


class Order(db.Model):
    __tablename__ = "order"
    __table_args__ = (
        db.Index("ix_order_brand_location", "brand_id", "location_id"),
    )

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    brand_id = db.Column(db.String(32), db.ForeignKey("brand.id"), nullable=False)
    location_id = db.Column(db.String(32), db.ForeignKey("location.id"), nullable=False)
    delivery_type = db.Column(db.String(10), nullable=False)          # pickup or delivery
    status = db.Column(db.String(30), default="pending_payment")
    pickup_time = db.Column(db.DateTime, nullable=True)

    customer_name = db.Column(db.String(120), nullable=True)
    customer_email = db.Column(db.String(255), nullable=True, index=True)
    customer_phone = db.Column(db.String(30), nullable=True)
    delivery_address = db.Column(db.JSON, nullable=True)

    voucher_code = db.Column(db.String(50), nullable=True)
    subtotal = money_column(nullable=False)
    total_discount = money_column(default=0)
    checkout_total = money_column(nullable=False)
    payment_details = db.Column(db.JSON, nullable=False)              # priced snapshot at checkout

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    items = db.relationship("OrderItem", backref="order", cascade="all, delete-orphan", lazy=True)

    def to_dict(self):
        return {
            "id": self.id,
            "brand_id": self.brand_id,
            "location_id": self.location_id,
            "delivery_type": self.delivery_type,
            "status": self.status,
            "voucher_code": self.voucher_code,
            "subtotal": float(self.subtotal),
            "total_discount": float(self.total_discount or 0),
            "checkout_total": float(self.checkout_total),
            "payment_details": self.payment_details,
            "items": [i.to_dict() for i in self.items],
        }


class OrderItem(db.Model):
    __tablename__ = "order_item"

    id = db.Column(BIGINT, primary_key=True)
    order_id = db.Column(db.String(32), db.ForeignKey("order.id"), nullable=False, index=True)
    line_id = db.Column(db.String(64), nullable=False)
    product_id = db.Column(db.String(64), nullable=False)
    item_type = db.Column(db.String(10), default="product")
    name = db.Column(db.String(255))
    quantity = db.Column(db.Integer)
    base_price = money_column()
    unit_price = money_column()
    toppings = db.Column(db.JSON, default=list)
    discount_label = db.Column(db.String(255), nullable=True)
    item_discount = money_column(default=0)

    def to_dict(self):
        return {
            "line_id": self.line_id,
            "product_id": self.product_id,
            "item_type": self.item_type,
            "name": self.name,
            "quantity": self.quantity,
            "base_price": float(self.base_price),
            "unit_price": float(self.unit_price),
            "toppings": self.toppings or [],
            "discount_label": self.discount_label,
            "item_discount": float(self.item_discount or 0),
        }
