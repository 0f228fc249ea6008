"""
Service de Memoriais: criação com convite da família, controle de acesso,
listagem pública em cache e geração de QR Code.

Regras de acesso:
- admin gerencia qualquer memorial
- funerária gerencia os memoriais que criou
- família gerencia o memorial vinculado à sua conta
- visitantes veem memoriais públicos e não inativos
"""

import logging
import secrets
from datetime import timedelta
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from portal.config.constants import (
    MemorialCategory,
    MemorialStatus,
    MemorialVisibility,
    SlugConfig,
)
from portal.config.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from portal.config.settings import settings
from portal.domain.models import Principal
from portal.domain.sqlmodels import FamilyUser, Memorial
from portal.infrastructure.redis_client import redis_cache
from portal.infrastructure.repositories.account_repository import (
    FamilyUserRepository,
    FuneralHomeRepository,
)
from portal.infrastructure.repositories.content_repository import (
    DedicationRepository,
    DescendantRepository,
    PhotoRepository,
)
from portal.infrastructure.repositories.memorial_repository import MemorialRepository
from portal.presentation.schemas.memorial_schemas import (
    MemorialCreate,
    MemorialUpdate,
    PublicMemorialOut,
)
from portal.utils.cache import TTLCache
from portal.utils.dates import utcnow
from portal.utils.qr_codes import build_memorial_url, generate_qr_code
from portal.utils.slug import generate_memorial_slug, strip_accents

logger = logging.getLogger("service.memorials")

MEMORIAL_NOT_FOUND = "Memorial não encontrado"

# Listagem pública (ativos + públicos) sem filtros; filtros rodam sobre a cópia em cache
_PUBLIC_LIST_KEY = "public"
_public_list_cache: TTLCache[list[dict]] = TTLCache(ttl_seconds=settings.cache.memorial_list_ttl)

# Campos que não aceitam null numa atualização parcial
_NON_NULLABLE_FIELDS = {"full_name", "visibility", "status", "is_historical"}


async def clear_memorial_cache() -> int:
    """Esvazia o cache da listagem pública (memória e Redis). Retorna entradas removidas."""
    removed = _public_list_cache.clear()
    await redis_cache.clear_memorial_list()
    if removed:
        logger.info("Cache de memoriais limpo (%s entradas)", removed)
    return removed


def can_manage_memorial(principal: Optional[Principal], memorial: Memorial) -> bool:
    if principal is None:
        return False
    if principal.is_admin:
        return True
    if principal.is_funeral_home:
        return memorial.funeral_home_id == principal.account_id
    if principal.is_family_user:
        return memorial.family_user_id == principal.account_id
    return False


def ensure_viewable(memorial: Optional[Memorial], principal: Optional[Principal]) -> Memorial:
    """
    Aplica as regras de visualização pública.

    Raises:
        NotFoundError: memorial inexistente ou inativo (para quem não é dono)
        PermissionDeniedError: memorial privado
    """
    if memorial is None:
        raise NotFoundError("Memorial", message=MEMORIAL_NOT_FOUND)
    if can_manage_memorial(principal, memorial):
        return memorial
    if memorial.status == MemorialStatus.INACTIVE.value:
        raise NotFoundError("Memorial", memorial.slug, message=MEMORIAL_NOT_FOUND)
    if memorial.visibility == MemorialVisibility.PRIVATE.value:
        raise PermissionDeniedError("Este memorial é privado")
    return memorial


def _normalize_text(value: Optional[str]) -> str:
    return strip_accents(value or "").lower()


def filter_public_memorials(
    items: list[dict],
    search: Optional[str] = None,
    category: Optional[str] = None,
) -> list[dict]:
    """
    Aplica busca (nome, biografia, naturalidade; sem acento/caixa) e categoria.

    Examples:
        >>> items = [{"full_name": "Frei Damião", "is_historical": True, "category": "Devoção Popular"}]
        >>> len(filter_public_memorials(items, search="damiao"))
        1
        >>> filter_public_memorials(items, category="family")
        []
    """
    result = items
    category = (category or MemorialCategory.ALL).strip().lower()

    if category == MemorialCategory.HISTORICAL:
        result = [item for item in result if item.get("is_historical")]
    elif category == MemorialCategory.FAMILY:
        result = [item for item in result if not item.get("is_historical")]
    elif category in MemorialCategory.BY_LABEL:
        label = MemorialCategory.BY_LABEL[category]
        result = [item for item in result if item.get("category") == label]

    term = _normalize_text(search).strip()
    if term:
        result = [
            item
            for item in result
            if term in _normalize_text(item.get("full_name"))
            or term in _normalize_text(item.get("biography"))
            or term in _normalize_text(item.get("birthplace"))
        ]
    return result


class MemorialService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = MemorialRepository(session)
        self.funeral_homes = FuneralHomeRepository(session)
        self.family_users = FamilyUserRepository(session)
        self.descendants = DescendantRepository(session)
        self.photos = PhotoRepository(session)
        self.dedications = DedicationRepository(session)

    # ─── Leitura ───────────────────────────────────────────────────────────

    async def list_memorials(
        self,
        principal: Principal,
        funeral_home_id: Optional[int] = None,
        family_user_id: Optional[int] = None,
    ) -> list[tuple[Memorial, int, int]]:
        """Memoriais do painel; fora do admin, sempre restritos à própria conta."""
        if principal.is_funeral_home:
            funeral_home_id, family_user_id = principal.account_id, None
        elif principal.is_family_user:
            funeral_home_id, family_user_id = None, principal.account_id
        return await self.repo.list_with_counts(
            funeral_home_id=funeral_home_id, family_user_id=family_user_id
        )

    async def list_public_memorials(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
    ) -> list[dict]:
        items = await _public_list_cache.get(_PUBLIC_LIST_KEY)
        if items is None:
            items = await redis_cache.get_memorial_list()
            if items is None:
                memorials = await self.repo.list_public_active()
                items = [
                    PublicMemorialOut.model_validate(m, from_attributes=True).model_dump(mode="json")
                    for m in memorials
                ]
                await redis_cache.set_memorial_list(items)
                logger.debug("Listagem pública carregada do banco (%s memoriais)", len(items))
            await _public_list_cache.set(_PUBLIC_LIST_KEY, items)
        return filter_public_memorials(items, search=search, category=category)

    async def _get_managed(self, memorial_id: int, principal: Principal) -> Memorial:
        memorial = await self.repo.get_by_id(memorial_id)
        if memorial is None:
            raise NotFoundError("Memorial", memorial_id, message=MEMORIAL_NOT_FOUND)
        if not can_manage_memorial(principal, memorial):
            raise PermissionDeniedError("Você não tem permissão para gerenciar este memorial")
        return memorial

    async def _with_content(self, memorial: Memorial) -> dict[str, Any]:
        data = memorial.model_dump()
        data["descendants"] = [d.model_dump() for d in await self.descendants.list_by_memorial(memorial.id)]
        data["photos"] = [p.model_dump() for p in await self.photos.list_by_memorial(memorial.id)]
        data["dedications"] = [d.model_dump() for d in await self.dedications.list_by_memorial(memorial.id)]
        return data

    async def get_memorial(self, memorial_id: int, principal: Principal) -> dict[str, Any]:
        memorial = await self._get_managed(memorial_id, principal)
        return await self._with_content(memorial)

    async def get_memorial_by_slug(
        self, slug: str, principal: Optional[Principal] = None
    ) -> dict[str, Any]:
        memorial = ensure_viewable(await self.repo.get_by_slug(slug.strip().lower()), principal)
        return await self._with_content(memorial)

    # ─── Escrita ───────────────────────────────────────────────────────────

    async def _unique_slug(self, full_name: str) -> str:
        for attempt in range(1, SlugConfig.MAX_ATTEMPTS + 1):
            slug = generate_memorial_slug(full_name)
            if not await self.repo.slug_exists(slug):
                return slug
            logger.warning("Colisão de slug (tentativa %s): %s", attempt, slug)
        raise ConflictError("Não foi possível gerar um endereço único para o memorial", field="slug")

    async def _resolve_family_user(
        self, email: str, name: Optional[str]
    ) -> tuple[FamilyUser, Optional[str]]:
        """Busca a família pelo e-mail ou cria a conta pendente com convite."""
        existing = await self.family_users.get_by_email(email)
        if existing is not None:
            return existing, None

        token = secrets.token_hex(32)
        family_user = await self.family_users.create(
            FamilyUser(
                name=(name or "").strip() or email.split("@", 1)[0],
                email=email,
                invitation_token=token,
                invitation_expiry=utcnow() + timedelta(days=settings.auth.invitation_ttl_days),
                is_active=False,
            )
        )
        logger.info("Convite criado para família: id=%s", family_user.id)
        return family_user, token

    async def create_memorial(self, data: MemorialCreate, principal: Principal) -> dict[str, Any]:
        if principal.is_funeral_home:
            funeral_home_id = principal.account_id
            if not data.family_email:
                raise ValidationError("family_email é obrigatório", field="family_email")
        elif principal.is_admin:
            funeral_home_id = data.funeral_home_id
            if funeral_home_id is not None and not await self.funeral_homes.get_by_id(funeral_home_id):
                raise NotFoundError("Funerária", funeral_home_id, message="Funerária não encontrada")
        else:
            raise PermissionDeniedError("Apenas funerárias e administradores criam memoriais")

        family_user_id = None
        invitation_token = None
        if data.family_email:
            family_user, invitation_token = await self._resolve_family_user(
                data.family_email, data.family_name
            )
            family_user_id = family_user.id

        fields = data.model_dump(
            exclude={"family_email", "family_name", "funeral_home_id", "status", "is_historical"},
            exclude_none=True,
        )
        memorial = await self.repo.create(
            Memorial(
                **fields,
                slug=await self._unique_slug(data.full_name),
                status=data.status or MemorialStatus.PENDING_DATA.value,
                is_historical=bool(data.is_historical),
                funeral_home_id=funeral_home_id,
                family_user_id=family_user_id,
            )
        )
        await self.session.commit()
        await clear_memorial_cache()

        logger.info(
            "Memorial criado: id=%s slug=%s by=%s family=%s",
            memorial.id,
            memorial.slug,
            principal.subject,
            family_user_id,
        )
        return {
            "id": memorial.id,
            "slug": memorial.slug,
            "family_user_id": family_user_id,
            "invitation_token": invitation_token,
        }

    async def update_memorial(
        self, memorial_id: int, data: MemorialUpdate, principal: Principal
    ) -> Memorial:
        memorial = await self._get_managed(memorial_id, principal)
        changes = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None or key not in _NON_NULLABLE_FIELDS
        }
        if "full_name" in changes:
            changes["full_name"] = changes["full_name"].strip()
            if not changes["full_name"]:
                raise ValidationError("full_name é obrigatório", field="full_name")
        if not changes:
            return memorial

        memorial = await self.repo.update_fields(memorial, changes)
        await self.session.commit()
        await clear_memorial_cache()
        logger.info("Memorial atualizado: id=%s campos=%s", memorial.id, sorted(changes))
        return memorial

    async def delete_memorial(self, memorial_id: int, principal: Principal) -> Memorial:
        """Exclusão lógica: o memorial passa a inativo e some das páginas públicas."""
        memorial = await self._get_managed(memorial_id, principal)
        memorial = await self.repo.update_fields(
            memorial, {"status": MemorialStatus.INACTIVE.value}
        )
        await self.session.commit()
        await clear_memorial_cache()
        logger.info("Memorial desativado: id=%s by=%s", memorial.id, principal.subject)
        return memorial

    # ─── QR Code ───────────────────────────────────────────────────────────

    async def generate_qr_code(
        self,
        slug: str,
        principal: Optional[Principal],
        fmt: str = "png",
        base_url: Optional[str] = None,
    ) -> dict[str, str]:
        """QR Code da página pública; segue as mesmas regras de visualização."""
        memorial = ensure_viewable(await self.repo.get_by_slug(slug.strip().lower()), principal)

        url = build_memorial_url(base_url or settings.server.public_base_url, memorial.slug)
        qr_code = generate_qr_code(url, fmt)
        return {"slug": memorial.slug, "url": url, "format": fmt, "qr_code": qr_code}
