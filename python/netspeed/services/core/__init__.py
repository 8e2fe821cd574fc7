from .utils import BaseService, ServiceLoggerMixin, timed

__all__ = ["BaseService", "ServiceLoggerMixin", "timed"]
