"""
Exceções customizadas do Portal.
Hierarquia de exceções para tratamento de erros consistente.

Cada exceção define:
- message: Mensagem legível para o usuário
- code: Código de erro para programático (ex: "VALIDATION_ERROR")
- status_code: Código HTTP padrão para a exceção
"""

from typing import Optional


class PortalError(Exception):
    """Exceção base do Portal. Todas as exceções customizadas herdam desta."""

    status_code: int = 500  # Default para erros internos

    def __init__(self, message: str, code: Optional[str] = None):
        self.message = message
        self.code = code or "PORTAL_ERROR"
        super().__init__(self.message)


class ConfigurationError(PortalError):
    """Erro de configuração (arquivo não encontrado, formato inválido, etc.)."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message, "CONFIG_ERROR")


class DatabaseError(PortalError):
    """Erro de banco de dados (conexão, query, etc.)."""

    status_code = 503  # Service Unavailable

    def __init__(self, message: str):
        super().__init__(message, "DB_ERROR")


class ValidationError(PortalError):
    """Erro de validação de entrada."""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None, code: Optional[str] = None):
        super().__init__(message, code or "VALIDATION_ERROR")
        self.field = field


class AuthenticationError(PortalError):
    """Credenciais ausentes ou inválidas."""

    status_code = 401

    def __init__(self, message: str = "E-mail ou senha inválidos", code: Optional[str] = None):
        super().__init__(message, code or "UNAUTHORIZED")


class PermissionDeniedError(PortalError):
    """Usuário autenticado sem permissão para o recurso."""

    status_code = 403

    def __init__(self, message: str = "Acesso negado", code: Optional[str] = None):
        super().__init__(message, code or "FORBIDDEN")


class NotFoundError(PortalError):
    """Recurso genérico não encontrado."""

    status_code = 404

    def __init__(self, resource: str, identifier: object = None, message: Optional[str] = None,
                 code: Optional[str] = None):
        if message is None:
            message = f"{resource} '{identifier}' não encontrado"
        super().__init__(message, code or "NOT_FOUND")
        self.resource = resource
        self.identifier = identifier


class ConflictError(PortalError):
    """Violação de unicidade (e-mail, slug, etc.)."""

    status_code = 409

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, "CONFLICT")
        self.field = field


class PaymentDeclinedError(PortalError):
    """Pagamento recusado pelo emissor ou pelo provedor."""

    status_code = 402

    def __init__(self, message: str, code: str = "CARD_DECLINED"):
        super().__init__(message, code)


class PaymentProviderError(PortalError):
    """Falha de comunicação com o provedor de pagamentos."""

    status_code = 502

    def __init__(self, message: str, service: str = "stripe"):
        super().__init__(message, "PAYMENT_PROVIDER_ERROR")
        self.service = service


class ServiceError(PortalError):
    """Erro genérico de serviço."""

    status_code = 500

    def __init__(self, message: str, service: Optional[str] = None):
        super().__init__(message, "SERVICE_ERROR")
        self.service = service
