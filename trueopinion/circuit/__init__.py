# Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
# All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
# See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
# Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

"""
Package circuit provides the circuit breaker shared by all client calls.

This package implements the circuit breaker pattern to protect the backend:
- Explicit state management (closed, open, half-open)
- Consecutive failure threshold
- Single trial call after the reset timeout
- State change callbacks and statistics
"""

from .circuit import (
    # Core circuit breaker
    CircuitBreaker,
    CircuitBreakerOptions,

    # State management
    CircuitState,
    StateTransition,

    # Statistics
    CircuitStats,
)

__all__ = [
    # Core circuit breaker
    'CircuitBreaker',
    'CircuitBreakerOptions',

    # State management
    'CircuitState',
    'StateTransition',

    # Statistics
    'CircuitStats',
]
