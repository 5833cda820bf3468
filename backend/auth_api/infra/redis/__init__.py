from .response_cache import RedisResponseCache

__all__ = ["RedisResponseCache"]
