from enum import Enum


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    COLLECTED = "collected"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


EARNING_ORDER_STATUSES = (OrderStatus.DELIVERED, OrderStatus.COLLECTED)


class RefundPaidBy(str, Enum):
    RESTAURANT = "restaurant"
    PLATFORM = "platform"


class CommissionType(str, Enum):
    FIXED = "fixed"
    PERCENTAGE = "percentage"


class PayoutFrequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"


class PayoutStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    PAID = "paid"
    FAILED = "failed"


class PaymentMethod(str, Enum):
    BANK_TRANSFER = "bank_transfer"
    PAYPAL = "paypal"
    STRIPE = "stripe"
    OTHER = "other"
