# Middleware package init
"""
Character API - Middleware Package
===================================

Middleware Chain:
    Request → [Request ID] → [Access Log] → Route Handler

    1. Request ID first: the access log line carries the request's ID
    2. Access Log: measures latency around the handler and records status
       and response size

    Responses pass back through in reverse order, so X-Request-ID is set on
    every response, including error responses.
"""
