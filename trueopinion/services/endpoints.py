"""
REST endpoint catalogue for the True Opinion backend.

Paths are relative to ``ClientConfig.base_url`` (which ends in ``/api``).
"""


class AuthEndpoints:
    LOGIN = "/auth/login"
    REGISTER_PATIENT = "/auth/register/patient"
    REGISTER_DOCTOR = "/auth/register/doctor"
    FORGOT_PASSWORD = "/auth/forgot-password"
    RESET_PASSWORD = "/auth/reset-password"
    REFRESH_TOKEN = "/auth/refresh"
    LOGOUT = "/auth/logout"
    VALIDATE = "/auth/validate"


class PatientEndpoints:
    PROFILE = "/patient/profile"
    APPLICATIONS = "/patient/applications"
    DOCTORS = "/patient/doctors"
    PAYMENTS = "/patient/payments"
    NOTIFICATIONS = "/patient/notifications"


class DoctorEndpoints:
    PROFILE = "/doctor/profile"
    APPLICATIONS = "/doctor/applications"
    AVAILABILITY = "/doctor/availability"
    EARNINGS = "/doctor/earnings"
    NOTIFICATIONS = "/doctor/notifications"


class AdminEndpoints:
    USERS = "/admin/users"
    DOCTORS_PENDING = "/admin/doctors/pending"
    DOCTORS_BULK = "/admin/doctors/bulk"
    NOTIFICATIONS = "/admin/notifications"
    ANALYTICS = "/admin/analytics"

    @staticmethod
    def doctor_approve(doctor_id) -> str:
        return f"/admin/doctors/{doctor_id}/approve"

    @staticmethod
    def doctor_reject(doctor_id) -> str:
        return f"/admin/doctors/{doctor_id}/reject"

    @staticmethod
    def user_suspend(user_id) -> str:
        return f"/admin/users/{user_id}/suspend"

    @staticmethod
    def user_activate(user_id) -> str:
        return f"/admin/users/{user_id}/activate"


class FileEndpoints:
    UPLOAD = "/files/upload"

    @staticmethod
    def download(file_id) -> str:
        return f"/files/download/{file_id}"

    @staticmethod
    def info(file_id) -> str:
        return f"/files/{file_id}"

    @staticmethod
    def delete(file_id) -> str:
        return f"/files/{file_id}"

    @staticmethod
    def preview(file_id) -> str:
        return f"/files/preview/{file_id}"

    @staticmethod
    def by_application(application_id) -> str:
        return f"/files/application/{application_id}"


class NotificationEndpoints:
    BASE = "/notifications"
    UNREAD = "/notifications/unread"
    UNREAD_COUNT = "/notifications/unread/count"
    MARK_ALL_READ = "/notifications/mark-all-read"

    @staticmethod
    def mark_read(notification_id) -> str:
        return f"/notifications/{notification_id}/read"


class PublicEndpoints:
    STATS = "/public/stats"
    CONTACT = "/public/contact"


class API_ENDPOINTS:
    AUTH = AuthEndpoints
    PATIENT = PatientEndpoints
    DOCTOR = DoctorEndpoints
    ADMIN = AdminEndpoints
    FILES = FileEndpoints
    NOTIFICATIONS = NotificationEndpoints
    PUBLIC = PublicEndpoints
