"""HTTP interface: response envelope, routers and app factory."""

from api.base import APIResponse, ErrorCodes, success_response, error_response
from api.app import create_app, build_services
