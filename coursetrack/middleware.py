# coursetrack/middleware.py
import uuid

from .log_config import current_request_id

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware:
    """Tag log records of one request with the caller's X-Request-ID, or a fresh one."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
        reset_token = current_request_id.set(request_id)
        try:
            response = self.get_response(request)
        finally:
            current_request_id.reset(reset_token)
        response[REQUEST_ID_HEADER] = request_id
        return response
