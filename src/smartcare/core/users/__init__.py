"""User listing and creation domain."""

from smartcare.core.users.invitations import (
    InvitationFailure,
    InvitationService,
    build_invite_metadata,
    can_create_for_partner,
    classify_invitation_error,
    parse_partner_id,
)
from smartcare.core.users.query import (
    USER_FILTER_BUILDERS,
    build_user_query,
    user_predicates,
    visibility_predicate,
)
from smartcare.core.users.types import (
    USER_FILTER_PARAMS,
    CreateUserRequest,
    InvitedUser,
    UserFilters,
    UserRecord,
)

__all__ = [
    "USER_FILTER_BUILDERS",
    "USER_FILTER_PARAMS",
    "CreateUserRequest",
    "InvitationFailure",
    "InvitationService",
    "InvitedUser",
    "UserFilters",
    "UserRecord",
    "build_invite_metadata",
    "build_user_query",
    "can_create_for_partner",
    "classify_invitation_error",
    "parse_partner_id",
    "user_predicates",
    "visibility_predicate",
]
