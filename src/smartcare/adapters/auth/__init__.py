"""Identity provider adapters."""

from smartcare.adapters.auth.gotrue import GoTrueAdminClient, GoTrueConfig

__all__ = [
    "GoTrueAdminClient",
    "GoTrueConfig",
]
