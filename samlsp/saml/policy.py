"""Attribute-based access control over the trusted header namespace."""

import logging
from collections.abc import Awaitable, Callable

from fastapi import HTTPException, Request, status

from samlsp.saml.headers import PREFIX_STATE_KEY, trusted_attributes

logger = logging.getLogger(__name__)


def require_attribute(name: str, value: str) -> Callable[[Request], Awaitable[None]]:
    """Build a dependency allowing only sessions where ``name`` has ``value``.

    Relies on :class:`~samlsp.saml.middleware.RequireAccountMiddleware` having
    authorized the request and recorded its header prefix; it performs no
    authentication itself and refuses requests the guard never saw.

    Example::

        @app.get("/staff", dependencies=[
            Depends(require_attribute("eduPersonAffiliation", "Staff")),
        ])
    """

    async def _guard(request: Request) -> None:
        prefix = getattr(request.state, PREFIX_STATE_KEY, None)
        if prefix is None:
            logger.warning("require_attribute used on a route outside the guard")
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN)
        values = trusted_attributes(request, prefix).get(name.lower(), [])
        if value not in values:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN)

    return _guard
