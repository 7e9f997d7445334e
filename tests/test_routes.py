"""
HTTP-level tests through the FastAPI app.

The lifespan is not run, so no database, Redis or scheduler is needed:
``get_db`` yields a mock session and, where a test needs a caller,
``get_current_user`` is overridden.
"""

from datetime import UTC, date, datetime
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from academy.core.auth import get_current_user
from academy.core.database import get_db
from academy.core.security import create_access_token
from academy.main import app
from academy.modules.users.models import UserRole
from academy.modules.users.registration import RegistrationResult


@pytest.fixture
def client(mock_db):
    async def _override_db():
        yield mock_db

    app.dependency_overrides[get_db] = _override_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def login_as():
    def _login_as(user):
        app.dependency_overrides[get_current_user] = lambda: user

    return _login_as


def _stamp_row(row):
    """Stand-in for refresh(): fill server-generated columns."""
    now = datetime.now(UTC)
    row.id = row.id or str(uuid4())
    row.created_at = now
    row.updated_at = now


class TestHealth:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}


class TestAuthentication:
    def test_missing_session_is_401(self, client):
        response = client.get("/api/v1/auth/me")

        assert response.status_code == 401
        assert response.json()["detail"]["error"] == "NOT_AUTHENTICATED"

    def test_role_cookie_authenticates(self, client, staff_user):
        token = create_access_token(subject=staff_user.id)
        client.cookies.set("token_staff", token)

        with patch(
            "academy.core.auth.UserRepository.get_by_id",
            AsyncMock(return_value=staff_user),
        ):
            response = client.get("/api/v1/auth/me")

        assert response.status_code == 200
        assert response.json()["accountId"] == "APS003"
        assert response.json()["role"] == "Staff"

    def test_dependent_login_is_refused(self, client, make_user, parent_user):
        child = make_user(
            UserRole.STUDENT,
            account_id="APS010",
            email="kid@test.com",
            guardian_id=parent_user.id,
        )

        with patch("academy.modules.auth.service.UserRepository") as users:
            users.get_by_email = AsyncMock(return_value=None)
            users.get_dependent_by_email = AsyncMock(return_value=child)
            response = client.post(
                "/api/v1/auth/login",
                json={"email": "kid@test.com", "password": "Password1!"},
            )

        assert response.status_code == 403
        assert response.json() == {
            "detail": {
                "error": "DEPENDENT_LOGIN",
                "message": "Please login using guardian account",
            }
        }

    def test_logout_clears_role_cookie(self, client, login_as, parent_user):
        login_as(parent_user)

        response = client.post("/api/v1/auth/logout")

        assert response.status_code == 200
        cookie = response.headers["set-cookie"]
        assert cookie.startswith("token_parent=")
        assert "Max-Age=0" in cookie


class TestBanners:
    def test_admin_creates_banner_with_default_order(self, client, login_as, admin_user, mock_db):
        login_as(admin_user)
        mock_db.refresh.side_effect = _stamp_row

        response = client.post(
            "/api/v1/banners",
            json={
                "title": "Term 1 enrolments open",
                "mediaUrl": "https://cdn.example.com/banners/term1.png",
                "mediaType": "image/png",
            },
        )

        assert response.status_code == 201
        body = response.json()
        assert body["order"] == 0
        assert body["title"] == "Term 1 enrolments open"
        assert body["createdBy"] == admin_user.id
        mock_db.add.assert_called_once()

    def test_missing_media_is_400(self, client, login_as, admin_user):
        login_as(admin_user)

        response = client.post("/api/v1/banners", json={"title": "No media"})

        assert response.status_code == 400
        assert "mediaUrl" in response.json()["detail"]["message"]

    def test_parent_cannot_create_banner(self, client, login_as, parent_user):
        login_as(parent_user)

        response = client.post("/api/v1/banners", json={"title": "Nope"})

        assert response.status_code == 403
        assert response.json()["detail"]["error"] == "INSUFFICIENT_ROLE"

    def test_unknown_banner_is_404(self, client, mock_db):
        mock_db.get.return_value = None

        response = client.get(f"/api/v1/banners/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["detail"]["error"] == "BANNER_NOT_FOUND"


class TestRegistration:
    def test_sets_cookie_for_registered_role(self, client, make_user):
        student = make_user(UserRole.STUDENT, account_id="APS042", email="sam@test.com")
        result = RegistrationResult(accounts=[student], primary=student, access_token="signed")

        with patch(
            "academy.modules.users.router.register_accounts",
            AsyncMock(return_value=result),
        ):
            response = client.post(
                "/api/v1/users/register",
                json={
                    "firstName": "Sam",
                    "lastName": "Lee",
                    "email": "sam@test.com",
                    "password": "Password1!",
                    "dob": "01-01-1990",
                },
            )

        assert response.status_code == 201
        assert response.headers["set-cookie"].startswith("token_student=signed")
        assert response.json()["user"]["accountId"] == "APS042"
        assert [account["accountId"] for account in response.json()["accounts"]] == ["APS042"]


class TestTestimonials:
    def test_sync_requires_admin(self, client, login_as, staff_user):
        login_as(staff_user)

        response = client.post("/api/v1/testimonials/sync")

        assert response.status_code == 403

    def test_admin_sync_reports_count(self, client, login_as, admin_user):
        login_as(admin_user)

        with patch(
            "academy.modules.testimonials.service.sync_google_reviews",
            AsyncMock(return_value=5),
        ):
            response = client.post("/api/v1/testimonials/sync")

        assert response.status_code == 200
        assert response.json()["synced"] == 5


class TestMediaUploads:
    @pytest.fixture
    def bucket(self):
        with (
            patch("academy.core.storage._put_object", MagicMock()) as put_object,
            patch("academy.core.storage._delete_object", MagicMock()) as delete_object,
        ):
            yield put_object, delete_object

    def test_uploaded_file_becomes_banner_media(
        self, client, login_as, admin_user, mock_db, bucket
    ):
        put_object, delete_object = bucket
        login_as(admin_user)
        mock_db.refresh.side_effect = _stamp_row

        response = client.post(
            "/api/v1/banners",
            data={"title": "Open day"},
            files={"banner": ("open day.png", b"png-bytes", "image/png")},
        )

        assert response.status_code == 201
        stored_key = put_object.call_args.args[0]
        assert stored_key.startswith("banners/")
        assert stored_key.endswith("_open_day.png")
        assert response.json()["mediaUrl"].endswith(stored_key)
        assert response.json()["mediaType"] == "image/png"
        delete_object.assert_not_called()

    def test_rejected_create_discards_upload(self, client, login_as, admin_user, bucket):
        put_object, delete_object = bucket
        login_as(admin_user)

        response = client.post(
            "/api/v1/banners",
            files={"banner": ("hero.png", b"png-bytes", "image/png")},
        )

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "MISSING_FIELDS"
        delete_object.assert_called_once_with(put_object.call_args.args[0])

    def test_update_of_unknown_record_discards_upload(
        self, client, login_as, admin_user, mock_db, bucket
    ):
        put_object, delete_object = bucket
        login_as(admin_user)
        mock_db.get.return_value = None

        response = client.put(
            f"/api/v1/banners/{uuid4()}",
            data={"title": "Renamed"},
            files={"banner": ("hero.png", b"png-bytes", "image/png")},
        )

        assert response.status_code == 404
        delete_object.assert_called_once_with(put_object.call_args.args[0])

    def test_disallowed_file_is_never_stored(self, client, login_as, admin_user, bucket):
        put_object, delete_object = bucket
        login_as(admin_user)

        response = client.post(
            "/api/v1/banners",
            data={"title": "Brochure"},
            files={"banner": ("brochure.pdf", b"%PDF", "application/pdf")},
        )

        assert response.status_code == 400
        put_object.assert_not_called()
        delete_object.assert_not_called()


class TestUserDetail:
    def test_parent_sees_own_dependents(self, client, login_as, parent_user, make_user):
        login_as(parent_user)
        child = make_user(
            UserRole.STUDENT,
            account_id="APS004",
            email=parent_user.email,
            guardian_id=parent_user.id,
            dob=date(2016, 3, 9),
        )
        repository = MagicMock(
            get_by_id=AsyncMock(return_value=parent_user),
            list_dependents=AsyncMock(return_value=[child]),
        )

        with patch("academy.modules.users.service.UserRepository", repository):
            response = client.get(f"/api/v1/users/{parent_user.id}")

        assert response.status_code == 200
        body = response.json()
        assert body["accountId"] == parent_user.account_id
        assert [dependent["accountId"] for dependent in body["dependents"]] == ["APS004"]
        assert body["dependents"][0]["dob"] == "09-03-2016"
        repository.list_dependents.assert_awaited_once()

    def test_student_has_no_dependents(self, client, login_as, admin_user, make_user):
        login_as(admin_user)
        student = make_user(UserRole.STUDENT, account_id="APS003")
        repository = MagicMock(
            get_by_id=AsyncMock(return_value=student),
            list_dependents=AsyncMock(return_value=[]),
        )

        with patch("academy.modules.users.service.UserRepository", repository):
            response = client.get(f"/api/v1/users/{student.id}")

        assert response.status_code == 200
        assert response.json()["dependents"] == []
        repository.list_dependents.assert_not_called()
