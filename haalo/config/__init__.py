from haalo.config.settings import config

__all__ = ["config"]
