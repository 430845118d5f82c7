from sqlalchemy import Column, Integer, String, Float, DateTime, Text, ForeignKey, Enum, Boolean, JSON
from sqlalchemy.orm import relationship
from datetime import datetime
from .database import Base
import enum


class UsageType(str, enum.Enum):
    OWN_USE = "uso_consumo"
    RESALE = "revenda"


class BrazilianState(str, enum.Enum):
    RS = "RS"
    SC = "SC"
    PR = "PR"


class OrderStatus(str, enum.Enum):
    SUBMITTED = "submitted"
    CONTACTED = "contacted"
    CANCELLED = "cancelled"


class User(Base):
    """Local accounts — used when AUTH_BACKEND is 'local'."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, nullable=False)
    password_hash = Column(String, nullable=False)
    name = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    site_address = Column(Text, nullable=True)  # endereco_obra
    usage_type = Column(Enum(UsageType), default=UsageType.OWN_USE)
    icms_taxpayer = Column(Boolean, default=False)
    state = Column(Enum(BrazilianState), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    auth_tokens = relationship("AuthToken", back_populates="user", cascade="all, delete-orphan")


class AuthToken(Base):
    """JWT refresh token storage — access tokens are stateless."""
    __tablename__ = "auth_tokens"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    token_hash = Column(String, nullable=False)
    token_type = Column(String, default="refresh")
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="auth_tokens")


class CartSlot(Base):
    """One serialized cart per key. Rewritten whole on every mutation."""
    __tablename__ = "cart_slots"

    key = Column(String, primary_key=True)
    items_json = Column(JSON, default=list)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Order(Base):
    """Order request — a seller follows up by contact, nothing is fulfilled here."""
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    order_number = Column(String, unique=True, nullable=False)
    owner_key = Column(String, index=True, nullable=False)  # user:<id> or anonymous cart key
    customer_name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    notes = Column(Text, nullable=True)
    items_json = Column(JSON, default=list)  # CartItem snapshot
    total = Column(Float, default=0.0)
    status = Column(Enum(OrderStatus), default=OrderStatus.SUBMITTED)
    created_at = Column(DateTime, default=datetime.utcnow)
