from ._version import __version__
from .secrets import Role, load_secrets, redacted_dump, reveal_for_transport, validate

__all__ = ["__version__", "Role", "load_secrets", "validate", "redacted_dump", "reveal_for_transport"]
