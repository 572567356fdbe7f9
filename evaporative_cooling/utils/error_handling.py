import functools
import logging
from typing import Type

from evaporative_cooling.utils.exceptions import EvaporativeCoolingException


def handle_phase_errors(phase: str, wrap_as: Type[EvaporativeCoolingException] = EvaporativeCoolingException):
    """
    Decorator for consistent error handling around a pipeline phase.

    Project exceptions are re-raised after being annotated with the phase and
    the owner's ``current_iteration``. Anything else is wrapped in ``wrap_as``.
    A failure is logged once, by the innermost decorated call; enclosing
    phases only fill in missing context.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            owner = args[0] if args else None
            logger = getattr(owner, 'logger', None) or logging.getLogger(func.__module__)
            iteration = getattr(owner, 'current_iteration', None)
            try:
                return func(*args, **kwargs)
            except EvaporativeCoolingException as e:
                e.annotate(phase, iteration)
                if not e.reported:
                    logger.error(f"{phase} failed: {e}")
                    e.reported = True
                raise
            except Exception as e:
                logger.error(f"{phase} failed: {e}", exc_info=True)
                wrapped = wrap_as(f"{phase} failed: {str(e)}", phase=phase, iteration=iteration)
                wrapped.reported = True
                raise wrapped from e
        return wrapper
    return decorator
