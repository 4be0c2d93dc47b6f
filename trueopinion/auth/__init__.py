# Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
# All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
# See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
# Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

"""
Package auth coordinates access token recovery for the True Opinion client.

- Single-flight refresh of an expired access token
- FIFO queue of callers waiting for the refresh to settle
- Session expiry signalling when the refresh fails
"""

from .refresh import (
    RefreshCoordinator,
    RefreshFunc,
    SessionExpiredHook,
)

__all__ = [
    'RefreshCoordinator',
    'RefreshFunc',
    'SessionExpiredHook',
]
