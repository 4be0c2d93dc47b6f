# Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
# All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
# See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
# Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

"""
Package middleware composes the client's resilience stages.

The client runs every call through, outermost first:

    CacheMiddleware -> RefreshMiddleware -> CircuitBreakerMiddleware
        -> RetryMiddleware -> AuthHeaderMiddleware -> transport
"""

from .pipeline import Handler, Middleware, Pipeline, transport_handler
from .cache import CacheMiddleware
from .auth import AuthHeaderMiddleware, RefreshMiddleware
from .circuit import CircuitBreakerMiddleware
from .retry import RetryMiddleware

__all__ = [
    # Pipeline
    'Handler',
    'Middleware',
    'Pipeline',
    'transport_handler',

    # Stages
    'CacheMiddleware',
    'RefreshMiddleware',
    'CircuitBreakerMiddleware',
    'RetryMiddleware',
    'AuthHeaderMiddleware',
]
