"""Route gating decisions for the presentation layer.

The presentation layer asks guard_route() before showing a page and acts
on the answer: render it, show a loading state, or navigate elsewhere.
Role checks go through SessionManager.is_admin only.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional
from urllib.parse import urlencode

from heritage.utils.logging import get_logger

from .session import SessionManager

logger = get_logger(__name__)

HOME_PATH = "/"
LOGIN_PATH = "/login"
BOOKING_PATH = "/booking"


class RouteAccess(str, Enum):
    """Who may open a route."""

    PUBLIC = "public"
    AUTHENTICATED = "authenticated"
    ADMIN = "admin"


class RouteAction(str, Enum):
    """What the presentation layer should do."""

    ALLOW = "allow"
    WAIT = "wait"
    REDIRECT = "redirect"


@dataclass(frozen=True)
class RouteDecision:
    action: RouteAction
    redirect_to: Optional[str] = None
    return_to: Optional[str] = None


ROUTES: dict[str, RouteAccess] = {
    "/": RouteAccess.PUBLIC,
    "/exhibits": RouteAccess.PUBLIC,
    BOOKING_PATH: RouteAccess.PUBLIC,
    LOGIN_PATH: RouteAccess.PUBLIC,
    "/register": RouteAccess.PUBLIC,
    "/profile": RouteAccess.AUTHENTICATED,
    "/admin": RouteAccess.ADMIN,
}


def route_access(path: str) -> RouteAccess:
    """Resolve the access level for a path.

    Sub-paths inherit from their closest listed prefix, so /admin/users is
    an admin route and /exhibits/42 is public. Unlisted paths are public.
    """
    path = "/" + path.split("?", 1)[0].strip("/")
    while True:
        if path in ROUTES:
            return ROUTES[path]
        if path == "/":
            return RouteAccess.PUBLIC
        path = path.rsplit("/", 1)[0] or "/"


def guard_route(session: SessionManager, path: str) -> RouteDecision:
    """Decide whether the current identity may open a route.

    Args:
        session: Session manager to consult
        path: Requested path

    Returns:
        WAIT while the session is resolving, otherwise ALLOW or a REDIRECT
        (to the login page with return_to for anonymous users, or home for
        non-admins on admin routes)
    """
    access = route_access(path)
    if access == RouteAccess.PUBLIC:
        return RouteDecision(RouteAction.ALLOW)

    if not session.is_ready:
        return RouteDecision(RouteAction.WAIT)

    if not session.is_authenticated:
        logger.info("Redirecting anonymous user from %s to login", path)
        return RouteDecision(
            RouteAction.REDIRECT,
            redirect_to=f"{LOGIN_PATH}?{urlencode({'return_to': path})}",
            return_to=path,
        )

    if access == RouteAccess.ADMIN and not session.is_admin:
        logger.info("Redirecting non-admin away from %s", path)
        return RouteDecision(RouteAction.REDIRECT, redirect_to=HOME_PATH)

    return RouteDecision(RouteAction.ALLOW)
