from datetime import datetime

from models import db, money_column, new_id


class Brand(db.Model):
    __tablename__ = "brand"

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    name = db.Column(db.String(100), nullable=False)
    currency = db.Column(db.String(3), default="dkk")

    # Checkout fees
    bag_fee = money_column(nullable=True)
    admin_fee = money_column(nullable=True)
    admin_fee_type = db.Column(db.String(20), nullable=True)      # fixed or percentage
    vat_percentage = db.Column(db.Numeric(5, 2), nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    locations = db.relationship("Location", backref="brand", lazy=True)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "currency": self.currency,
            "bag_fee": float(self.bag_fee) if self.bag_fee is not None else None,
            "admin_fee": float(self.admin_fee) if self.admin_fee is not None else None,
            "admin_fee_type": self.admin_fee_type,
            "vat_percentage": float(self.vat_percentage) if self.vat_percentage is not None else None,
        }


class Location(db.Model):
    __tablename__ = "location"

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    brand_id = db.Column(db.String(32), db.ForeignKey("brand.id"), nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False)
    delivery_fee = money_column(nullable=True)
    is_active = db.Column(db.Boolean, default=True)
