# alerte_meteo/errors.py
# ------------------------------------------------------------
# Domain exceptions. Routes translate them into the
# {"ok": false, "error": ...} envelope (see main.py).
# ------------------------------------------------------------


class AlertError(Exception):
    """Base class for alert service errors."""

    status_code = 500
    public_message = "Erreur serveur"


class InvalidAlertPayload(AlertError):
    """Raised by strict normalization when a write payload is unusable."""

    status_code = 422
    public_message = "Niveau d'alerte invalide"


class StoreError(AlertError):
    """Raised when the alert document cannot be read or written."""


class AdminAuthError(AlertError):
    """Base class for admin session failures."""

    status_code = 401
    public_message = "Non autorisé"


class SessionMissing(AdminAuthError):
    pass


class SessionExpired(AdminAuthError):
    public_message = "Session expirée"
