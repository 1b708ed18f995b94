"""Request and response types passed through handler chains."""

from conceptkit.http.query import QueryParams
from conceptkit.http.request import ActionRequest
from conceptkit.http.response import Response

__all__ = [
    "ActionRequest",
    "QueryParams",
    "Response",
]
