"""
User-facing messages and severities for True Opinion client outcomes.
"""

from dataclasses import dataclass
from enum import Enum


class Severity(Enum):
    """Severity of a notification surfaced to the user."""
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class ErrorMessages:
    """Error messages shown to users when a call fails."""
    network_error: str = "Network error. Please check your connection and try again."
    timeout: str = "Request timeout. Please try again."
    unauthorized: str = "You are not authorized to access this resource."
    forbidden: str = "You do not have permission to perform this action."
    not_found: str = "The requested resource was not found."
    conflict: str = "Resource already exists."
    validation_error: str = "Please check your input and try again."
    too_many_requests: str = "Too many requests. Please try again later."
    server_error: str = "Server error. Please try again later."
    session_expired: str = "Your session has expired. Please log in again."
    circuit_open: str = "Service temporarily unavailable. Please try again later."
    generic_error: str = "Something went wrong. Please try again."


@dataclass(frozen=True)
class SuccessMessages:
    """Success messages callers commonly attach to mutations."""
    login_success: str = "Login successful!"
    logout_success: str = "Logged out successfully."
    registration_success: str = "Registration successful!"
    profile_updated: str = "Profile updated successfully."
    application_submitted: str = "Application submitted successfully!"
    review_submitted: str = "Review submitted successfully."
    doctor_approved: str = "Doctor approved successfully."
    doctor_rejected: str = "Doctor rejected successfully."
    notification_sent: str = "Notification sent successfully."
    file_uploaded: str = "File uploaded successfully."
    availability_updated: str = "Availability updated successfully."


ERROR_MESSAGES = ErrorMessages()
SUCCESS_MESSAGES = SuccessMessages()
