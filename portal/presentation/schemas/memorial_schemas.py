"""
Schemas Pydantic para a API de Memoriais e seu conteúdo
(descendentes, fotos e dedicatórias).

Separados do modelo ORM para controle explícito de serialização
e validação nas entradas/saídas da API.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from .auth_schemas import normalize_email

# Datas históricas podem ser parciais: "1849", "1849-08" ou "1849-08-19"
_DATE_PATTERN = r"^\d{4}(-\d{2}(-\d{2})?)?$"

Visibility = Literal["public", "private"]
MemorialStatusLiteral = Literal["active", "pending_data", "inactive"]


class _MemorialFields(BaseModel):
    birth_date: Optional[str] = Field(default=None, pattern=_DATE_PATTERN)
    death_date: Optional[str] = Field(default=None, pattern=_DATE_PATTERN)
    birthplace: Optional[str] = Field(default=None, max_length=255)
    filiation: Optional[str] = Field(default=None, max_length=2000)
    biography: Optional[str] = Field(default=None, max_length=50000)
    main_photo: Optional[str] = Field(default=None, max_length=2048)
    is_historical: Optional[bool] = None
    category: Optional[str] = Field(default=None, max_length=100)
    grave_location: Optional[str] = Field(default=None, max_length=2000)


class MemorialCreate(_MemorialFields):
    """Payload para criação de memorial (POST /api/memorials)."""

    full_name: str = Field(min_length=1, max_length=255)
    family_email: Optional[str] = Field(default=None, max_length=320)
    family_name: Optional[str] = Field(default=None, max_length=255)
    funeral_home_id: Optional[int] = Field(
        default=None, description="Somente administradores escolhem a funerária"
    )
    visibility: Visibility = "public"
    status: Optional[MemorialStatusLiteral] = None

    @field_validator("full_name")
    @classmethod
    def strip_full_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("full_name é obrigatório")
        return v

    @field_validator("family_email")
    @classmethod
    def check_family_email(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return normalize_email(v)


class MemorialUpdate(_MemorialFields):
    """Atualização parcial: apenas campos enviados são alterados."""

    full_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    visibility: Optional[Visibility] = None
    status: Optional[MemorialStatusLiteral] = None


class MemorialCreatedOut(BaseModel):
    success: bool = True
    id: int
    slug: str
    family_user_id: Optional[int] = None
    invitation_token: Optional[str] = None


class MemorialOut(BaseModel):
    id: int
    slug: str
    full_name: str
    birth_date: Optional[str] = None
    death_date: Optional[str] = None
    birthplace: Optional[str] = None
    filiation: Optional[str] = None
    biography: Optional[str] = None
    main_photo: Optional[str] = None
    visibility: Visibility
    status: MemorialStatusLiteral
    is_historical: bool = False
    category: Optional[str] = None
    grave_location: Optional[str] = None
    funeral_home_id: Optional[int] = None
    family_user_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class MemorialSummaryOut(MemorialOut):
    """Item das listagens dos painéis, com contadores."""

    photo_count: int = 0
    dedication_count: int = 0
    status_label: Optional[str] = None


class PublicMemorialOut(BaseModel):
    """Item da listagem pública (/memoriais)."""

    id: int
    slug: str
    full_name: str
    birth_date: Optional[str] = None
    death_date: Optional[str] = None
    birthplace: Optional[str] = None
    biography: Optional[str] = None
    main_photo: Optional[str] = None
    is_historical: bool = False
    category: Optional[str] = None


class DescendantCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    relationship: str = Field(min_length=1, max_length=100)

    @field_validator("name", "relationship")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        return v.strip()


class DescendantOut(BaseModel):
    id: int
    memorial_id: int
    name: str
    relationship: str
    created_at: datetime

    model_config = {"from_attributes": True}


class PhotoCreate(BaseModel):
    file_url: str = Field(min_length=1, max_length=2048)
    caption: Optional[str] = Field(default=None, max_length=1000)
    sort_order: int = Field(default=0, ge=0)


class PhotoOut(BaseModel):
    id: int
    memorial_id: int
    file_url: str
    caption: Optional[str] = None
    sort_order: int
    created_at: datetime

    model_config = {"from_attributes": True}


class DedicationCreate(BaseModel):
    """
    Payload de dedicatória (POST /api/dedications).

    Campos opcionais no schema para que a ausência gere a mensagem
    de negócio (400) em vez do 422 genérico.
    """

    memorial_id: Optional[int] = None
    author_name: Optional[str] = Field(default=None, max_length=255)
    message: Optional[str] = Field(default=None, max_length=5000)

    @field_validator("author_name", "message")
    @classmethod
    def strip_whitespace(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if isinstance(v, str) else v


class DedicationOut(BaseModel):
    id: int
    memorial_id: int
    author_name: str
    message: str
    created_at: datetime

    model_config = {"from_attributes": True}


class MemorialDetailOut(MemorialOut):
    descendants: List[DescendantOut] = Field(default_factory=list)
    photos: List[PhotoOut] = Field(default_factory=list)
    dedications: List[DedicationOut] = Field(default_factory=list)


class QRCodeOut(BaseModel):
    success: bool = True
    slug: str
    url: str
    format: Literal["png", "svg"]
    qr_code: str
