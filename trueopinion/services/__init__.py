# Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
# All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
# See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
# Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

"""
Package services provides thin, role-specific wrappers over ResilientClient.

Every call goes through the client, so all of them share its retry,
circuit breaker, token refresh and notification behaviour.
"""

from .endpoints import (
    API_ENDPOINTS,
    AuthEndpoints,
    PatientEndpoints,
    DoctorEndpoints,
    AdminEndpoints,
    FileEndpoints,
    NotificationEndpoints,
    PublicEndpoints,
)
from .base import BaseService, clean_filters
from .auth import AuthService
from .patient import PatientService
from .doctor import DoctorService
from .admin import AdminService
from .notifications import NotificationService
from .files import FileService, load_upload
from .public import PublicService

__all__ = [
    # Endpoints
    'API_ENDPOINTS',
    'AuthEndpoints',
    'PatientEndpoints',
    'DoctorEndpoints',
    'AdminEndpoints',
    'FileEndpoints',
    'NotificationEndpoints',
    'PublicEndpoints',

    # Services
    'BaseService',
    'clean_filters',
    'AuthService',
    'PatientService',
    'DoctorService',
    'AdminService',
    'NotificationService',
    'FileService',
    'load_upload',
    'PublicService',
]
