"""
Database table definitions.

SQLAlchemy 2.0 declarative models for users, contacts and addresses. They
are the single source of the relational schema: the DDL applied at startup
is compiled from this metadata, while queries run as raw SQL through asyncpg.

Ownership chain: users.username <- contacts.username <- addresses.contact_id.
Both foreign keys cascade on delete.
"""

from typing import List, Optional

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


class User(Base):
    """User account. The token column holds the static API token."""
    __tablename__ = "users"

    username: Mapped[str] = mapped_column(
        String(100),
        primary_key=True
    )
    password: Mapped[str] = mapped_column(
        String(100),
        nullable=False
    )
    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False
    )
    token: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
        unique=True
    )

    contacts: Mapped[List["Contact"]] = relationship(
        "Contact",
        back_populates="user",
        passive_deletes=True
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<User(username='{self.username}', name='{self.name}')>"


class Contact(Base):
    """Contact owned by exactly one user."""
    __tablename__ = "contacts"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True
    )
    first_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False
    )
    last_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False
    )
    email: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True
    )
    phone: Mapped[Optional[str]] = mapped_column(
        String(20),
        nullable=True
    )
    username: Mapped[str] = mapped_column(
        String(100),
        ForeignKey("users.username", ondelete="CASCADE"),
        nullable=False
    )

    user: Mapped[User] = relationship("User", back_populates="contacts")
    addresses: Mapped[List["Address"]] = relationship(
        "Address",
        back_populates="contact",
        passive_deletes=True
    )

    __table_args__ = (
        Index("idx_contacts_username", "username"),
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Contact(id={self.id}, username='{self.username}')>"


class Address(Base):
    """Address owned by exactly one contact."""
    __tablename__ = "addresses"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True
    )
    street: Mapped[str] = mapped_column(
        String(255),
        nullable=False
    )
    city: Mapped[str] = mapped_column(
        String(100),
        nullable=False
    )
    province: Mapped[str] = mapped_column(
        String(100),
        nullable=False
    )
    country: Mapped[str] = mapped_column(
        String(100),
        nullable=False
    )
    postal_code: Mapped[str] = mapped_column(
        String(10),
        nullable=False
    )
    contact_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("contacts.id", ondelete="CASCADE"),
        nullable=False
    )

    contact: Mapped[Contact] = relationship("Contact", back_populates="addresses")

    __table_args__ = (
        Index("idx_addresses_contact_id", "contact_id"),
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Address(id={self.id}, contact_id={self.contact_id})>"
