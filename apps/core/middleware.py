import uuid

import structlog

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIdMiddleware:
    """Attach a request id to every request, its log lines and its response."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        incoming = request.headers.get(REQUEST_ID_HEADER, "")
        request.request_id = incoming[:64] if incoming else uuid.uuid4().hex

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request.request_id)
        try:
            response = self.get_response(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id")

        response[REQUEST_ID_HEADER] = request.request_id
        return response
