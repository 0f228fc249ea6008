"""Public config package exports."""

from .constants import AccountType as AccountType
from .constants import PLANS as PLANS
from .constants import StatusLabels as StatusLabels
from .exceptions import AuthenticationError as AuthenticationError
from .exceptions import ConfigurationError as ConfigurationError
from .exceptions import ConflictError as ConflictError
from .exceptions import DatabaseError as DatabaseError
from .exceptions import NotFoundError as NotFoundError
from .exceptions import PermissionDeniedError as PermissionDeniedError
from .exceptions import PortalError as PortalError
from .exceptions import ValidationError as ValidationError
from .logging_config import get_logger as get_logger
from .logging_config import setup_logging as setup_logging
