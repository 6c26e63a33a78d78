"""polygate: one request shape in front of several inference providers."""

from .catalog import ModelCatalog
from .llms import InvocationEngine, Message, configure_logging

__version__ = "0.1.0"

__all__ = ["ModelCatalog", "InvocationEngine", "Message", "configure_logging", "__version__"]
