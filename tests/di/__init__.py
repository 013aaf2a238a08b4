"""Mock providers for testing."""

from .email import MockEmailProvider
from .oauth import MockOAuthProvider
from .persistence import MockPersistenceProvider
from .container import build_test_container

__all__ = [
    "MockEmailProvider",
    "MockOAuthProvider",
    "MockPersistenceProvider",
    "build_test_container",
]
