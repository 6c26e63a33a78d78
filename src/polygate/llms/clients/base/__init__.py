from .adapter import ProviderAdapter

__all__ = ["ProviderAdapter"]
