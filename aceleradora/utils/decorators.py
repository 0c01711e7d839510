from functools import wraps
from flask import abort
from flask_login import current_user

from ..models.user import ROLE_ADMIN


def role_required(*roles):
    """401 for anonymous users, 403 when the user's role is not in `roles`."""
    def decorator(view):
        @wraps(view)
        def wrapped(*args, **kwargs):
            if not current_user.is_authenticated:
                abort(401, description="No autorizado")
            if getattr(current_user, "role", None) not in roles:
                abort(403, description="Acceso restringido a: " + ", ".join(roles))
            return view(*args, **kwargs)
        return wrapped
    return decorator


admin_required = role_required(ROLE_ADMIN)
