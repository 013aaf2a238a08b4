"""Infrastructure providers."""

# Import bases
from .email import EmailProvider, EmailQueueProvider
from .oauth import OAuthProvider
from .persistence import PersistenceProvider

# Import implementations (needed for __subclasses__())
from .email import ProdEmailProvider  # noqa: F401
from .oauth import ProdOAuthProvider  # noqa: F401
from .persistence import ProdPersistenceProvider  # noqa: F401

__all__ = [
    "EmailProvider",
    "EmailQueueProvider",
    "OAuthProvider",
    "PersistenceProvider",
    "ProdEmailProvider",
    "ProdOAuthProvider",
    "ProdPersistenceProvider",
]
