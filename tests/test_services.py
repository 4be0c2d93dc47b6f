"""
Tests for the role services.
"""

import pytest

from trueopinion.common.messages import Severity
from trueopinion.core.types import ApiResponse, UploadFile
from trueopinion.errors import UnauthorizedError
from trueopinion.services import (
    API_ENDPOINTS,
    AdminService,
    AuthService,
    DoctorService,
    FileService,
    NotificationService,
    PatientService,
    PublicService,
    clean_filters,
    load_upload,
)


LOGIN_RESPONSE = {
    "token": "jwt-1",
    "type": "Bearer",
    "id": 7,
    "email": "patient@example.com",
    "firstName": "Asha",
    "lastName": "Rao",
    "userType": "PATIENT",
}


class TestAuthService:
    """Test login, logout and session checks."""

    @pytest.mark.asyncio
    async def test_login_stores_token_and_user(self, make_client, transport, notifier):
        transport.add_response("POST", API_ENDPOINTS.AUTH.LOGIN, data=LOGIN_RESPONSE)
        client = make_client()
        auth = AuthService(client)

        await auth.login("patient@example.com", "secret")

        assert await client.token_store.get() == "jwt-1"
        assert await auth.current_user() == {
            "id": 7, "email": "patient@example.com", "firstName": "Asha",
            "lastName": "Rao", "userType": "PATIENT",
        }
        assert await auth.is_authenticated()
        assert transport.requests[0].body == {"email": "patient@example.com", "password": "secret"}
        assert notifier.notifications[0].severity == Severity.SUCCESS

    @pytest.mark.asyncio
    async def test_bad_credentials_do_not_trigger_refresh(self, make_client, transport, notifier):
        transport.add_response("POST", API_ENDPOINTS.AUTH.LOGIN, status=401,
                               data={"message": "Invalid email or password"})
        client = make_client()

        with pytest.raises(UnauthorizedError):
            await AuthService(client).login("patient@example.com", "wrong")

        assert transport.calls("POST", API_ENDPOINTS.AUTH.REFRESH_TOKEN) == []
        assert notifier.messages() == ["Invalid email or password"]

    @pytest.mark.asyncio
    async def test_logout_clears_session_even_on_failure(self, make_client, transport, notifier):
        transport.add_response("GET", "/patient/profile", data={})
        transport.add_response("POST", API_ENDPOINTS.AUTH.LOGOUT, status=500)
        client = make_client(token="jwt-1")
        await client.get("/patient/profile", cache=True)

        await AuthService(client).logout()

        assert await client.token_store.get() is None
        assert len(client.cache) == 0
        assert notifier.messages() == []

    @pytest.mark.asyncio
    async def test_validate_token(self, make_client, transport):
        transport.add_response("GET", API_ENDPOINTS.AUTH.VALIDATE, data={"success": True})
        transport.add_response("GET", API_ENDPOINTS.AUTH.VALIDATE, status=401)
        client = make_client(token="jwt-1")
        auth = AuthService(client)

        assert await auth.validate_token() is True
        assert await auth.validate_token() is False
        assert transport.calls("POST", API_ENDPOINTS.AUTH.REFRESH_TOKEN) == []

    @pytest.mark.asyncio
    async def test_validate_without_token_skips_network(self, make_client, transport):
        assert await AuthService(make_client()).validate_token() is False
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_refresh_token(self, make_client, transport):
        transport.add_response("POST", API_ENDPOINTS.AUTH.REFRESH_TOKEN, data={"token": "jwt-2"})
        client = make_client(token="jwt-1")

        assert await AuthService(client).refresh_token() == "jwt-2"
        assert await client.token_store.get() == "jwt-2"


class TestRoleServices:
    """Test that role services hit the right endpoints."""

    @pytest.mark.asyncio
    async def test_patient_doctor_search_drops_empty_filters(self, make_client, transport):
        transport.add_response("GET", API_ENDPOINTS.PATIENT.DOCTORS, data=[])
        client = make_client()

        await PatientService(client).get_doctors({"specialization": "Cardiology", "city": "", "page": None})

        assert transport.requests[0].params == {"specialization": "Cardiology"}

    @pytest.mark.asyncio
    async def test_patient_submit_application(self, make_client, transport, notifier):
        transport.add_response("POST", API_ENDPOINTS.PATIENT.APPLICATIONS, data={"id": 3})
        client = make_client()

        assert await PatientService(client).submit_application({"doctorId": 1}) == {"id": 3}
        assert notifier.messages() == ["Application submitted successfully!"]

    @pytest.mark.asyncio
    async def test_doctor_review_application(self, make_client, transport):
        transport.add_response("POST", "/doctor/applications/12/review", data={})
        client = make_client()

        await DoctorService(client).review_application(12, {"opinion": "Surgery not needed"})

        assert transport.requests[0].body == {"opinion": "Surgery not needed"}

    @pytest.mark.asyncio
    async def test_admin_reject_doctor(self, make_client, transport):
        transport.add_response("POST", "/admin/doctors/4/reject", data={})
        client = make_client()

        await AdminService(client).reject_doctor(4, "Licence expired")

        assert transport.requests[0].body == {"reason": "Licence expired"}

    @pytest.mark.asyncio
    async def test_admin_bulk_review(self, make_client, transport):
        transport.add_response("POST", API_ENDPOINTS.ADMIN.DOCTORS_BULK, data={})
        client = make_client()

        await AdminService(client).bulk_review_doctors([1, 2], "APPROVE")

        assert transport.requests[0].body == {"doctorIds": [1, 2], "action": "APPROVE", "reason": None}

    @pytest.mark.asyncio
    async def test_notifications(self, make_client, transport):
        transport.add_response("GET", API_ENDPOINTS.NOTIFICATIONS.UNREAD_COUNT, data={"count": 4})
        transport.add_response("POST", "/notifications/9/read", data={})
        client = make_client()
        service = NotificationService(client)

        assert await service.get_unread_count() == 4
        await service.mark_read(9)

        assert transport.requests[1].url == "/notifications/9/read"

    @pytest.mark.asyncio
    async def test_public_stats_cached(self, make_client, transport):
        transport.add_response("GET", API_ENDPOINTS.PUBLIC.STATS, data={"doctors": 120})
        client = make_client()
        service = PublicService(client)

        await service.get_stats()
        assert await service.get_stats() == {"doctors": 120}
        assert len(transport.requests) == 1


class TestFileService:
    """Test uploads and file URLs."""

    @pytest.mark.asyncio
    async def test_upload_sends_form_fields(self, make_client, transport, notifier):
        sent = []

        def capture(request):
            sent.append(request)
            return ApiResponse(200, {"fileId": 5})

        transport.add_handler("POST", API_ENDPOINTS.FILES.UPLOAD, capture)
        client = make_client()
        progress = []
        file = UploadFile("xray.png", b"png", content_type="image/png", fields={"note": "left"})

        result = await FileService(client).upload(file, 7, "XRAY", on_progress=progress.append)

        assert result == {"fileId": 5}
        assert sent[0].upload.fields == {"note": "left", "userId": 7, "fileType": "XRAY", "applicationId": None}
        assert file.fields == {"note": "left"}
        assert progress == [100]
        assert notifier.messages() == ["File uploaded successfully."]

    @pytest.mark.asyncio
    async def test_load_upload_guesses_content_type(self, tmp_path):
        path = tmp_path / "report.pdf"
        path.write_bytes(b"%PDF-1.4")

        upload = await load_upload(str(path))

        assert upload.filename == "report.pdf"
        assert upload.content == b"%PDF-1.4"
        assert upload.content_type == "application/pdf"

    def test_download_and_preview_urls(self, make_client):
        service = FileService(make_client())
        assert service.download_url(3) == "http://api.test/files/download/3"
        assert service.preview_url(3) == "http://api.test/files/preview/3"


def test_clean_filters():
    assert clean_filters(None) is None
    assert clean_filters({}) is None
    assert clean_filters({"a": 1, "b": "", "c": None, "d": 0}) == {"a": 1, "d": 0}
