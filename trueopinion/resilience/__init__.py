# Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
# All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
# See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
# Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

"""
Package resilience provides the retry policy used by the True Opinion client.

- Retry decisions restricted to network errors, timeouts, 5xx and 429
- Exponential backoff capped at a maximum delay
"""

from .retry import (
    RetryPolicy,
    exponential_backoff,
)

__all__ = [
    'RetryPolicy',
    'exponential_backoff',
]
