# Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
# All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
# See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
# Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

"""
Package common provides shared messages and helpers for the True Opinion client.

This package contains:
- User-facing error and success messages
- Notification severities
- Hashing, JSON canonicalisation and URL helpers
"""

from .messages import (
    Severity,
    ErrorMessages,
    SuccessMessages,
    ERROR_MESSAGES,
    SUCCESS_MESSAGES,
)

from .utils import (
    generate_request_id,
    hash_string,
    canonical_json,
    monotonic_ms,
    get_current_time,
    join_url,
)

__all__ = [
    # Messages
    'Severity',
    'ErrorMessages',
    'SuccessMessages',
    'ERROR_MESSAGES',
    'SUCCESS_MESSAGES',

    # Utilities
    'generate_request_id',
    'hash_string',
    'canonical_json',
    'monotonic_ms',
    'get_current_time',
    'join_url',
]
