import inspect
import time
import functools
from typing import Any, Callable, TypeVar, cast

from glycotrack.utils.logger import logger

F = TypeVar('F', bound=Callable[..., Any])

def timing_decorator(func: F) -> F:
    """
    Decorator that logs the execution time of a function.

    Coroutine functions are awaited, so the logged time covers the whole call.
    
    Args:
        func: The function to time
        
    Returns:
        The wrapped function that logs timing information
    """
    if inspect.iscoroutinefunction(func):
        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            start_time = time.perf_counter()
            try:
                return await func(*args, **kwargs)
            finally:
                execution_time = time.perf_counter() - start_time
                logger.info(f"{func.__name__} completed in {execution_time:.4f} seconds")

        return cast(F, async_wrapper)

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        start_time = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            execution_time = time.perf_counter() - start_time
            logger.info(f"{func.__name__} completed in {execution_time:.4f} seconds")
    
    return cast(F, wrapper)
