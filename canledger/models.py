"""
Database Models
SQLAlchemy ORM models for the can delivery ledger
"""

from datetime import datetime
from decimal import Decimal
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


CUSTOMER_TYPES = ('shop', 'monthly', 'order')
ORDER_STATUSES = ('pending', 'delivered', 'completed', 'cancelled')


class Customer(db.Model):
    """Delivery customer"""
    __tablename__ = 'customers'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False, index=True)
    phone_number = db.Column(db.String(32), nullable=False, index=True)
    alternate_number = db.Column(db.String(32))
    address = db.Column(db.Text, nullable=False)

    customer_type = db.Column(db.String(16), nullable=False, default='monthly', index=True)  # shop, monthly, order
    can_qty = db.Column(db.Integer, nullable=False, default=0)  # baseline cans per delivery
    advance_amount = db.Column(db.Numeric(10, 2), nullable=False, default=0.00)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    daily_updates = db.relationship('DailyUpdate', backref='customer', lazy='dynamic',
                                    order_by='DailyUpdate.date')
    monthly_bills = db.relationship('MonthlyBill', backref='customer', lazy='dynamic')

    def to_dict(self):
        return {
            'customer_id': self.id,
            'name': self.name,
            'phone_number': self.phone_number,
            'alternate_number': self.alternate_number,
            'address': self.address,
            'customer_type': self.customer_type,
            'can_qty': self.can_qty or 0,
            'advance_amount': float(self.advance_amount or 0),
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<Customer {self.name}>'


class DailyUpdate(db.Model):
    """One day's delivered/collected/holding record for one customer"""
    __tablename__ = 'daily_updates'
    __table_args__ = (
        db.UniqueConstraint('customer_id', 'date', name='uq_daily_update_customer_date'),
        db.CheckConstraint('delivered_qty >= 0', name='ck_daily_update_delivered'),
        db.CheckConstraint('collected_qty >= 0', name='ck_daily_update_collected'),
    )

    id = db.Column(db.Integer, primary_key=True)
    customer_id = db.Column(db.Integer, db.ForeignKey('customers.id'), nullable=False, index=True)
    date = db.Column(db.Date, nullable=False, index=True)
    delivered_qty = db.Column(db.Integer, nullable=False, default=0)
    collected_qty = db.Column(db.Integer, nullable=False, default=0)
    holding_status = db.Column(db.Integer, nullable=False, default=0)
    notes = db.Column(db.Text)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'update_id': self.id,
            'customer_id': self.customer_id,
            'date': self.date.isoformat(),
            'delivered_qty': self.delivered_qty,
            'collected_qty': self.collected_qty,
            'holding_status': self.holding_status,
            'notes': self.notes,
        }

    def __repr__(self):
        return f'<DailyUpdate {self.customer_id} {self.date}>'


class MonthlyBill(db.Model):
    """Saved monthly bill for a customer"""
    __tablename__ = 'monthly_bills'
    __table_args__ = (
        db.UniqueConstraint('customer_id', 'bill_month', name='uq_monthly_bill_customer_month'),
    )

    id = db.Column(db.Integer, primary_key=True)
    customer_id = db.Column(db.Integer, db.ForeignKey('customers.id'), nullable=False, index=True)
    bill_month = db.Column(db.String(7), nullable=False, index=True)  # YYYY-MM
    total_cans = db.Column(db.Integer, nullable=False, default=0)
    delivery_days = db.Column(db.Integer, nullable=False, default=0)
    bill_amount = db.Column(db.Numeric(10, 2), nullable=False, default=0.00)
    paid_status = db.Column(db.Boolean, nullable=False, default=False)
    sent_status = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'bill_id': self.id,
            'customer_id': self.customer_id,
            'bill_month': self.bill_month,
            'total_cans': self.total_cans,
            'delivery_days': self.delivery_days,
            'bill_amount': float(self.bill_amount or 0),
            'paid_status': bool(self.paid_status),
            'sent_status': bool(self.sent_status),
        }

    def __repr__(self):
        return f'<MonthlyBill {self.customer_id} {self.bill_month}>'


class Price(db.Model):
    """Per-type unit prices; append-only history with a single active row"""
    __tablename__ = 'prices'

    id = db.Column(db.Integer, primary_key=True)
    shop_price = db.Column(db.Numeric(10, 2), nullable=False)
    monthly_price = db.Column(db.Numeric(10, 2), nullable=False)
    order_price = db.Column(db.Numeric(10, 2), nullable=False)
    effective_from = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False, index=True)

    @classmethod
    def get_active(cls):
        """Return the active price row or None"""
        return cls.query.filter_by(is_active=True).order_by(cls.effective_from.desc(), cls.id.desc()).first()

    def price_for(self, customer_type):
        """Unit price for a customer type; unknown types bill at the order price"""
        if customer_type == 'shop':
            return Decimal(self.shop_price)
        if customer_type == 'monthly':
            return Decimal(self.monthly_price)
        return Decimal(self.order_price)

    def to_dict(self):
        return {
            'price_id': self.id,
            'shop_price': float(self.shop_price),
            'monthly_price': float(self.monthly_price),
            'order_price': float(self.order_price),
            'effective_from': self.effective_from.isoformat() if self.effective_from else None,
            'is_active': bool(self.is_active),
        }

    def __repr__(self):
        return f'<Price {self.id} active={self.is_active}>'


class Order(db.Model):
    """One-off delivery order, independent of the daily ledger"""
    __tablename__ = 'orders'

    id = db.Column(db.Integer, primary_key=True)
    order_date = db.Column(db.Date, nullable=False, index=True)
    customer_name = db.Column(db.String(128), nullable=False)
    customer_phone = db.Column(db.String(32), nullable=False)
    customer_address = db.Column(db.Text, nullable=False)
    delivery_amount = db.Column(db.Numeric(10, 2), default=0.00)
    can_qty = db.Column(db.Integer, nullable=False)
    collected_qty = db.Column(db.Integer, nullable=False, default=0)
    collection_date = db.Column(db.Date)
    delivery_date = db.Column(db.Date, nullable=False)
    delivery_time = db.Column(db.String(16), nullable=False)
    order_status = db.Column(db.String(16), nullable=False, default='pending', index=True)
    notes = db.Column(db.Text)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def pending_cans(self):
        return (self.can_qty or 0) - (self.collected_qty or 0)

    def to_dict(self):
        return {
            'id': self.id,
            'order_date': self.order_date.isoformat(),
            'customer_name': self.customer_name,
            'customer_phone': self.customer_phone,
            'customer_address': self.customer_address,
            'delivery_amount': float(self.delivery_amount or 0),
            'can_qty': self.can_qty,
            'collected_qty': self.collected_qty or 0,
            'collection_date': self.collection_date.isoformat() if self.collection_date else None,
            'delivery_date': self.delivery_date.isoformat(),
            'delivery_time': self.delivery_time,
            'order_status': self.order_status,
            'notes': self.notes,
        }

    def __repr__(self):
        return f'<Order {self.id} {self.customer_name}>'


class ErrorLog(db.Model):
    """Captured application errors with request context"""
    __tablename__ = 'error_logs'
    __table_args__ = (
        db.Index('ix_error_logs_type_timestamp', 'error_type', 'timestamp'),
    )

    id = db.Column(db.Integer, primary_key=True)
    timestamp = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    error_type = db.Column(db.String(128), nullable=False, index=True)
    error_message = db.Column(db.Text, nullable=False)
    traceback = db.Column(db.Text)
    request_url = db.Column(db.String(512))
    request_method = db.Column(db.String(10))
    request_data = db.Column(db.Text)
    ip_address = db.Column(db.String(64))
    user_agent = db.Column(db.String(512))
    status_code = db.Column(db.Integer, index=True)
    blueprint = db.Column(db.String(64))
    endpoint = db.Column(db.String(128))

    def __repr__(self):
        return f'<ErrorLog {self.error_type} {self.timestamp}>'
