"""
Modelos de domínio do Portal que não são tabelas.
Define a identidade autenticada usada em toda a aplicação.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from portal.config.constants import ACCOUNT_SUBJECT_PREFIX, AccountType

_PREFIX_TO_TYPE = {prefix: account_type for account_type, prefix in ACCOUNT_SUBJECT_PREFIX.items()}


@dataclass(frozen=True)
class Principal:
    """
    Conta autenticada na requisição.

    Attributes:
        account_type: funerária, família ou administrador
        account_id: id na tabela correspondente
        name: nome de exibição
        email: e-mail de login
    """

    account_type: AccountType
    account_id: int
    name: str
    email: str

    @property
    def subject(self) -> str:
        """Identificador estável no token (ex: "funeral-12", "family-3")."""
        return build_subject(self.account_type, self.account_id)

    @property
    def is_admin(self) -> bool:
        return self.account_type == AccountType.ADMIN

    @property
    def is_funeral_home(self) -> bool:
        return self.account_type == AccountType.FUNERAL_HOME

    @property
    def is_family_user(self) -> bool:
        return self.account_type == AccountType.FAMILY_USER

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.account_id,
            "type": self.account_type.value,
            "name": self.name,
            "email": self.email,
            "open_id": self.subject,
        }


def build_subject(account_type: AccountType, account_id: int) -> str:
    return f"{ACCOUNT_SUBJECT_PREFIX[account_type]}-{account_id}"


def parse_subject(subject: Optional[str]) -> Optional[tuple]:
    """
    Decompõe o `sub` do token em (AccountType, id).

    Examples:
        >>> parse_subject("family-42")
        (<AccountType.FAMILY_USER: 'family_user'>, 42)
        >>> parse_subject("invalido") is None
        True
    """
    if not subject or "-" not in subject:
        return None
    prefix, _, raw_id = subject.partition("-")
    account_type = _PREFIX_TO_TYPE.get(prefix)
    if account_type is None or not raw_id.isdigit():
        return None
    return account_type, int(raw_id)
