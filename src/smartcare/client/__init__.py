"""Client-side helpers: API client and form controllers."""

from smartcare.client.api import ApiClientError, ClientConfig, SmartcareClient
from smartcare.client.filter_form import (
    FilterDraft,
    FilterFormController,
    build_query_params,
    ticket_filter_form,
    user_filter_form,
)
from smartcare.client.forms import CreateUserForm

__all__ = [
    "ApiClientError",
    "ClientConfig",
    "CreateUserForm",
    "FilterDraft",
    "FilterFormController",
    "SmartcareClient",
    "build_query_params",
    "ticket_filter_form",
    "user_filter_form",
]
