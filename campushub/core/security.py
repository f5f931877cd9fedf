from fastapi import Request


def require_admin(request: Request) -> None:
    """Admin gate for the management routes.

    Accepts every request for now; plug token verification in here once member
    auth lands, the routes already depend on it.
    """
    return None
