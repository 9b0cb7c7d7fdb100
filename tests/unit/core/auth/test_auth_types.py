"""Tests for auth domain types."""

from uuid import uuid4

from smartcare.core.auth.types import Principal, UserRole


class TestPrincipal:
    """Tests for Principal role helpers."""

    def test_non_client_admin_is_unrestricted(self) -> None:
        """ADMIN without client flag is exempt from scoping."""
        principal = Principal(id=uuid4(), role=UserRole.ADMIN, is_client=False, partner_id=None)

        assert principal.is_admin
        assert principal.is_unrestricted_admin

    def test_client_admin_is_restricted(self) -> None:
        """A client admin stays scoped to its partner."""
        principal = Principal(id=uuid4(), role=UserRole.ADMIN, is_client=True, partner_id=uuid4())

        assert principal.is_admin
        assert not principal.is_unrestricted_admin

    def test_manager_is_restricted(self) -> None:
        """Non-admin roles are never unrestricted."""
        principal = Principal(id=uuid4(), role=UserRole.MANAGER, is_client=False, partner_id=None)

        assert not principal.is_admin
        assert not principal.is_unrestricted_admin

    def test_unknown_role_is_restricted(self) -> None:
        """Roles outside the enum are treated as ordinary users."""
        principal = Principal(id=uuid4(), role=42, is_client=False, partner_id=None)

        assert not principal.is_unrestricted_admin


class TestUserRole:
    """Tests for UserRole."""

    def test_values(self) -> None:
        """Roles are small integers with ADMIN first."""
        assert UserRole.ADMIN == 1
        assert UserRole.MANAGER == 2
        assert UserRole.MEMBER == 3

    def test_label(self) -> None:
        """Labels are title-cased names."""
        assert UserRole.ADMIN.label == "Admin"
