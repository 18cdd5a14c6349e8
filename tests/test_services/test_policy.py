"""Tests for the authorization policy."""

from datetime import UTC, datetime

import pytest

from forum_api.models import User
from forum_api.services.errors import AuthenticationError, AuthorizationError
from forum_api.services.policy import (
    ANONYMOUS,
    Action,
    Reason,
    Requester,
    authorize,
    enforce,
    require_session,
)
from forum_api.services.sessions import AuthStage, Privilege, Session


def make_requester(user_id: int, is_admin: bool, stage: AuthStage) -> Requester:
    user = User(
        id=user_id,
        username=f"user{user_id}",
        salt="",
        hashed_password="",
        totp_secret="JBSWY3DPEHPK3PXP" if is_admin else None,
        is_admin=is_admin,
    )
    session = Session(
        id=f"session-{user_id}",
        user_id=user_id,
        stage=stage,
        created_at=datetime.now(UTC),
    )
    return Requester(user=user, session=session)


@pytest.fixture
def standard_user() -> Requester:
    return make_requester(3, is_admin=False, stage=AuthStage.PASSWORD)


@pytest.fixture
def password_admin() -> Requester:
    return make_requester(1, is_admin=True, stage=AuthStage.PASSWORD)


@pytest.fixture
def elevated_admin() -> Requester:
    return make_requester(1, is_admin=True, stage=AuthStage.SECOND_FACTOR)


class TestPrivilege:
    """Tests for privilege derivation."""

    def test_anonymous_is_standard(self) -> None:
        assert ANONYMOUS.privilege is Privilege.STANDARD
        assert not ANONYMOUS.is_authenticated
        assert ANONYMOUS.user_id is None

    def test_password_admin_is_standard(self, password_admin: Requester) -> None:
        assert password_admin.privilege is Privilege.STANDARD

    def test_second_factor_admin_is_elevated(self, elevated_admin: Requester) -> None:
        assert elevated_admin.privilege is Privilege.ELEVATED

    def test_demoted_admin_loses_elevation(self) -> None:
        """A completed second factor is not enough once the admin flag is gone."""
        requester = make_requester(1, is_admin=False, stage=AuthStage.SECOND_FACTOR)

        assert requester.privilege is Privilege.STANDARD

    def test_session_without_user_is_anonymous(self) -> None:
        session = Session(
            id="orphan", user_id=42, stage=AuthStage.SECOND_FACTOR, created_at=datetime.now(UTC)
        )
        requester = Requester(user=None, session=session)

        assert not requester.is_authenticated
        assert requester.privilege is Privilege.STANDARD


class TestAuthorize:
    """Tests for the authorize decision table."""

    @pytest.mark.parametrize(
        "action", [Action.READ_POSTS, Action.READ_COMMENTS, Action.CREATE_COMMENT]
    )
    def test_public_actions(self, action: Action) -> None:
        decision = authorize(action, ANONYMOUS)

        assert decision.permitted
        assert decision.reason is Reason.PUBLIC

    @pytest.mark.parametrize(
        "action", [Action.CREATE_POST, Action.TOGGLE_FLAG, Action.EDIT, Action.DELETE]
    )
    def test_anonymous_needs_session(self, action: Action) -> None:
        decision = authorize(action, ANONYMOUS, owner_id=None)

        assert not decision.permitted
        assert decision.reason is Reason.AUTHENTICATION_REQUIRED

    @pytest.mark.parametrize("action", [Action.CREATE_POST, Action.TOGGLE_FLAG])
    def test_session_actions(self, action: Action, standard_user: Requester) -> None:
        decision = authorize(action, standard_user)

        assert decision.permitted
        assert decision.reason is Reason.AUTHENTICATED

    @pytest.mark.parametrize("action", [Action.EDIT, Action.DELETE])
    def test_owner_may_modify(self, action: Action, standard_user: Requester) -> None:
        decision = authorize(action, standard_user, owner_id=3)

        assert decision.permitted
        assert decision.reason is Reason.OWNER

    @pytest.mark.parametrize("action", [Action.EDIT, Action.DELETE])
    def test_non_owner_denied(self, action: Action, standard_user: Requester) -> None:
        decision = authorize(action, standard_user, owner_id=4)

        assert not decision.permitted
        assert decision.reason is Reason.NOT_OWNER

    def test_anonymous_resource_has_no_owner(self, standard_user: Requester) -> None:
        decision = authorize(Action.EDIT, standard_user, owner_id=None)

        assert not decision.permitted

    def test_password_admin_treated_as_standard(self, password_admin: Requester) -> None:
        assert not authorize(Action.DELETE, password_admin, owner_id=3).permitted
        assert authorize(Action.DELETE, password_admin, owner_id=1).reason is Reason.OWNER

    @pytest.mark.parametrize("owner_id", [1, 3, None])
    def test_elevated_admin_may_modify_anything(
        self, owner_id: int | None, elevated_admin: Requester
    ) -> None:
        decision = authorize(Action.DELETE, elevated_admin, owner_id=owner_id)

        assert decision.permitted
        assert decision.reason is Reason.ELEVATED


class TestEnforce:
    """Tests for turning decisions into errors."""

    def test_permitted_returns_decision(self, standard_user: Requester) -> None:
        decision = enforce(Action.CREATE_POST, standard_user)

        assert decision.permitted

    def test_missing_session_raises_authentication_error(self) -> None:
        with pytest.raises(AuthenticationError) as exc_info:
            enforce(Action.CREATE_POST, ANONYMOUS)

        assert exc_info.value.status_code == 401

    def test_denied_raises_authorization_error(self, standard_user: Requester) -> None:
        with pytest.raises(AuthorizationError) as exc_info:
            enforce(Action.DELETE, standard_user, owner_id=4, denied_message="Not yours")

        assert exc_info.value.status_code == 403
        assert str(exc_info.value) == "Not yours"

    def test_require_session(self, standard_user: Requester) -> None:
        require_session(standard_user)

        with pytest.raises(AuthenticationError):
            require_session(ANONYMOUS)
