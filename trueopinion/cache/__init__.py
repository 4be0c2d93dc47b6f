# Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
# All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
# See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
# Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

"""
Package cache provides the short-lived response cache used on the read path.

Only GET responses are cached. Entries expire lazily: an expired entry is
removed the next time it is read and is never returned.
"""

from .response_cache import (
    CacheEntry,
    ResponseCache,
    make_cache_key,
    DEFAULT_TTL_MS,
)

__all__ = [
    'CacheEntry',
    'ResponseCache',
    'make_cache_key',
    'DEFAULT_TTL_MS',
]
