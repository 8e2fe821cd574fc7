import functools
import logging
import time
from typing import Callable, Optional

from netspeed.repositories.core.exceptions import ValidationError


def timed(operation_name: Optional[str] = None):
    """Decorator to time function execution with standardized logging"""
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            op_name = operation_name or f"{func.__module__}.{func.__name__}"
            logger = logging.getLogger(func.__module__)

            start_time = time.time()
            logger.debug(f"Starting {op_name}")

            try:
                result = func(*args, **kwargs)
                elapsed = time.time() - start_time
                logger.info(f"Completed {op_name} in {elapsed:.3f}s")
                return result
            except Exception as e:
                elapsed = time.time() - start_time
                # Rejected input is the caller's problem, not a server fault
                if isinstance(e, ValidationError):
                    logger.warning(f"{op_name} rejected input after {elapsed:.3f}s: {e}")
                else:
                    logger.error(f"Failed {op_name} after {elapsed:.3f}s: {e}", exc_info=True)
                raise
        return wrapper
    return decorator


class ServiceLoggerMixin:
    """Mixin for standardized logging in services"""

    @property
    def logger(self):
        if not hasattr(self, '_logger'):
            self._logger = logging.getLogger(self.__class__.__module__)
        return self._logger

    def _log_operation(self, operation: str, **details):
        """Standardized operation logging"""
        details_str = ', '.join(f"{k}={v}" for k, v in details.items())
        self.logger.info(f"[{self.__class__.__name__}] {operation}: {details_str}")

    def _log_debug(self, message: str, **details):
        """Standardized debug logging"""
        details_str = ', '.join(f"{k}={v}" for k, v in details.items()) if details else ""
        full_message = f"[{self.__class__.__name__}] {message}"
        if details_str:
            full_message += f" - {details_str}"
        self.logger.debug(full_message)


class BaseService(ServiceLoggerMixin):
    """Base class for all services with common functionality"""
    pass
