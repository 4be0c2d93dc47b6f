# Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
# All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
# See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
# Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

"""
Package transport provides the network boundary of the True Opinion client.

- Transport: abstract request/response boundary
- AiohttpTransport: production transport on aiohttp
- MockTransport: scripted in-memory transport for tests and demos
"""

from .base import Transport, report_progress
from .aiohttp_transport import AiohttpTransport
from .mock import MockTransport, SentRequest

__all__ = [
    'Transport',
    'report_progress',
    'AiohttpTransport',
    'MockTransport',
    'SentRequest',
]
