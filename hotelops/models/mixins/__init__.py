from .timestamp_mixin import TimestampMixin, utcnow

__all__ = ["TimestampMixin", "utcnow"]
