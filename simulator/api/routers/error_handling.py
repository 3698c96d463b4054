"""
Admin API error handling.

Decorator translating simulator and service errors into HTTPExceptions for
the admin endpoints.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status

from simulator.core.exceptions import ScenarioNotFoundError, SimulatorException

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def handle_simulator_errors(func: F) -> F:
    """
    Decorator mapping errors raised by admin operations to HTTP responses.

    ScenarioNotFoundError and "does not exist" ValueErrors become 404,
    other SimulatorExceptions and ValueErrors become 400, anything else 500.
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except HTTPException:
            raise

        except ScenarioNotFoundError as e:
            logger.warning("Scenario not found", extra={"scenario": e.name})
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)

        except SimulatorException as e:
            logger.warning("Invalid simulator request", extra={"error": str(e)})
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

        except ValueError as e:
            msg = str(e).lower()
            if "not found" in msg or "does not exist" in msg:
                logger.warning("Resource not found (ValueError)", extra={"error": str(e)})
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
            logger.warning("Invalid request (ValueError)", extra={"error": str(e)})
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

        except Exception as e:
            logger.exception("Unexpected failure in admin operation", extra={"error": str(e)})
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"An internal error occurred: {e}",
            )

    return wrapper  # type: ignore
