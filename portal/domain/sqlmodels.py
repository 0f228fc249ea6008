"""
Modelos SQLModel do Portal da Lembrança.

Contas (funerárias, famílias, administradores) e o conteúdo dos memoriais
(descendentes, fotos e dedicatórias).
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Column, DateTime, Text
from sqlmodel import Field, SQLModel

from portal.utils.dates import utcnow


# ============================================================
# Contas
# ============================================================


class FuneralHome(SQLModel, table=True):
    """Funerária parceira que cria memoriais para as famílias."""

    __tablename__ = "funeral_homes"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=255)
    email: str = Field(max_length=320, unique=True, index=True)
    password_hash: str = Field(max_length=255)
    phone: Optional[str] = Field(default=None, max_length=20)
    address: Optional[str] = Field(default=None, sa_column=Column(Text))
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))


class FamilyUser(SQLModel, table=True):
    """
    Familiar responsável pelo memorial.

    Criado pela funerária junto com o memorial; só recebe senha ao aceitar
    o convite (invitation_token), quando passa a is_active=True.
    """

    __tablename__ = "family_users"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=255)
    email: str = Field(max_length=320, unique=True, index=True)
    password_hash: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=20)
    invitation_token: Optional[str] = Field(
        default=None, max_length=255, unique=True, index=True
    )
    invitation_expiry: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    is_active: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))


class AdminUser(SQLModel, table=True):
    __tablename__ = "admin_users"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=255)
    email: str = Field(max_length=320, unique=True, index=True)
    password_hash: str = Field(max_length=255)
    is_active: bool = Field(default=True)
    last_login: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))


# ============================================================
# Memoriais
# ============================================================


class Memorial(SQLModel, table=True):
    """Página de homenagem a uma pessoa falecida, acessada por /m/{slug}."""

    __tablename__ = "memorials"

    id: Optional[int] = Field(default=None, primary_key=True)
    slug: str = Field(max_length=255, unique=True, index=True)
    full_name: str = Field(max_length=255)
    # Datas como texto ISO (YYYY-MM-DD); registros históricos têm datas parciais
    birth_date: Optional[str] = Field(default=None, max_length=10)
    death_date: Optional[str] = Field(default=None, max_length=10)
    birthplace: Optional[str] = Field(default=None, max_length=255)
    filiation: Optional[str] = Field(default=None, sa_column=Column(Text))
    biography: Optional[str] = Field(default=None, sa_column=Column(Text))
    main_photo: Optional[str] = Field(default=None, sa_column=Column(Text))
    visibility: str = Field(default="public", max_length=10)
    status: str = Field(default="pending_data", max_length=20, index=True)
    is_historical: bool = Field(default=False)
    category: Optional[str] = Field(default=None, max_length=100)
    grave_location: Optional[str] = Field(default=None, sa_column=Column(Text))
    funeral_home_id: Optional[int] = Field(
        default=None, foreign_key="funeral_homes.id", index=True
    )
    family_user_id: Optional[int] = Field(
        default=None, foreign_key="family_users.id", index=True
    )
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))


class Descendant(SQLModel, table=True):
    __tablename__ = "descendants"

    id: Optional[int] = Field(default=None, primary_key=True)
    memorial_id: int = Field(foreign_key="memorials.id", index=True)
    name: str = Field(max_length=255)
    relationship: str = Field(max_length=100)  # filho, neto, etc.
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))


class Photo(SQLModel, table=True):
    __tablename__ = "photos"

    id: Optional[int] = Field(default=None, primary_key=True)
    memorial_id: int = Field(foreign_key="memorials.id", index=True)
    file_url: str = Field(sa_column=Column(Text, nullable=False))
    caption: Optional[str] = Field(default=None, sa_column=Column(Text))
    sort_order: int = Field(default=0)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))


class Dedication(SQLModel, table=True):
    """Mensagem de homenagem deixada por um visitante."""

    __tablename__ = "dedications"

    id: Optional[int] = Field(default=None, primary_key=True)
    memorial_id: int = Field(foreign_key="memorials.id", index=True)
    author_name: str = Field(max_length=255)
    message: str = Field(sa_column=Column(Text, nullable=False))
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True), index=True)
