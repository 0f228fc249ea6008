"""
Constantes centralizadas do Portal.
Valores de domínio (status, rótulos, planos) devem ser definidos aqui.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple


class AccountType(str, Enum):
    """Tipos de conta com acesso autenticado."""

    FUNERAL_HOME = "funeral_home"
    FAMILY_USER = "family_user"
    ADMIN = "admin"


# Prefixo usado no `sub` do token de sessão
ACCOUNT_SUBJECT_PREFIX: Dict[AccountType, str] = {
    AccountType.FUNERAL_HOME: "funeral",
    AccountType.FAMILY_USER: "family",
    AccountType.ADMIN: "admin",
}


class MemorialVisibility(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"


class MemorialStatus(str, Enum):
    ACTIVE = "active"
    PENDING_DATA = "pending_data"
    INACTIVE = "inactive"


class ProductionStatus(str, Enum):
    NEW = "new"
    IN_PRODUCTION = "in_production"
    WAITING_DATA = "waiting_data"
    READY = "ready"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class OrderPriority(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


class LeadStatus(str, Enum):
    PENDING = "pending"
    CONTACTED = "contacted"
    CONVERTED = "converted"
    REJECTED = "rejected"


class PaymentMethod(str, Enum):
    CARD = "card"
    PIX = "pix"
    BOLETO = "boleto"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELED = "canceled"


class StatusLabels:
    """Rótulos exibidos no painel administrativo."""

    PRODUCTION = {
        ProductionStatus.NEW.value: "Novo",
        ProductionStatus.IN_PRODUCTION.value: "Em Produção",
        ProductionStatus.WAITING_DATA.value: "Aguardando Dados",
        ProductionStatus.READY.value: "Pronto",
        ProductionStatus.DELIVERED.value: "Entregue",
        ProductionStatus.CANCELLED.value: "Cancelado",
    }
    PRIORITY = {
        OrderPriority.LOW.value: "Baixa",
        OrderPriority.NORMAL.value: "Normal",
        OrderPriority.HIGH.value: "Alta",
        OrderPriority.URGENT.value: "Urgente",
    }
    LEAD = {
        LeadStatus.PENDING.value: "Pendente",
        LeadStatus.CONTACTED.value: "Contatado",
        LeadStatus.CONVERTED.value: "Convertido",
        LeadStatus.REJECTED.value: "Rejeitado",
    }
    MEMORIAL = {
        MemorialStatus.ACTIVE.value: "Ativo",
        MemorialStatus.PENDING_DATA.value: "Pendente",
        MemorialStatus.INACTIVE.value: "Inativo",
    }


class MemorialCategory:
    """Filtros da listagem pública de memoriais."""

    ALL = "all"
    HISTORICAL = "historical"
    FAMILY = "family"

    # Filtros que comparam o campo `category` do memorial
    BY_LABEL = {
        "politician": "Político",
        "artist": "Artista",
        "devotion": "Devoção Popular",
    }

    @classmethod
    def choices(cls) -> Tuple[str, ...]:
        return (cls.ALL, cls.HISTORICAL, cls.FAMILY, *cls.BY_LABEL.keys())


class SlugConfig:
    """Configurações de geração de slug."""

    BASE_MAX_LENGTH = 20
    RANDOM_SUFFIX_LENGTH = 6
    MAX_ATTEMPTS = 5
    FALLBACK_BASE = "memorial"


class CardRules:
    """Regras do gateway simulado para pagamentos com cartão."""

    MIN_DIGITS = 13
    MAX_DIGITS = 19
    DECLINED_SUFFIX = "0000"
    INSUFFICIENT_FUNDS_SUFFIX = "9999"


@dataclass(frozen=True)
class Plan:
    id: str
    name: str
    description: str
    price_cents: int
    interval: str
    features: List[str] = field(default_factory=list)
    popular: bool = False
    currency: str = "BRL"
    stripe_price_id: Optional[str] = None


PLANS: Tuple[Plan, ...] = (
    Plan(
        id="basic",
        name="Memorial Básico",
        description="Ideal para preservar memórias essenciais",
        price_cents=0,
        interval="one_time",
        features=[
            "Página memorial personalizada",
            "Até 5 fotos",
            "Biografia básica",
            "QR Code digital",
            "Compartilhamento em redes sociais",
        ],
    ),
    Plan(
        id="premium",
        name="Memorial Premium",
        description="Recursos completos para homenagens especiais",
        price_cents=9990,
        interval="one_time",
        popular=True,
        stripe_price_id="price_premium_memorial",
        features=[
            "Tudo do plano Básico",
            "Fotos ilimitadas",
            "Galeria de vídeos",
            "Árvore genealógica",
            "Dedicações ilimitadas",
            "Placa física com QR Code",
            "Suporte prioritário",
        ],
    ),
    Plan(
        id="family",
        name="Plano Família",
        description="Para famílias que desejam preservar múltiplas memórias",
        price_cents=24990,
        interval="year",
        stripe_price_id="price_family_annual",
        features=[
            "Até 5 memoriais Premium",
            "Fotos e vídeos ilimitados",
            "Árvore genealógica conectada",
            "Backup em nuvem",
            "Domínio personalizado",
            "5 placas físicas com QR Code",
            "Suporte VIP 24/7",
        ],
    ),
)


class SitemapConfig:
    """Páginas estáticas publicadas no sitemap: (caminho, changefreq, prioridade)."""

    STATIC_PAGES: Tuple[Tuple[str, str, str], ...] = (
        ("/", "weekly", "1.0"),
        ("/memoriais", "daily", "0.9"),
        ("/sobre", "monthly", "0.7"),
        ("/contato", "monthly", "0.6"),
        ("/planos", "monthly", "0.8"),
    )
    HISTORICAL_PRIORITY = "0.9"
    MEMORIAL_PRIORITY = "0.8"
