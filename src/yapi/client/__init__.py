"""HTTP client layer for yapi.

:class:`Transport` builds, sends and decodes requests; :class:`YapiClient`
is the facade that owns a transport, the token, and the resource services.

Example::

    from yapi.client import YapiClient

    with YapiClient("http://yapi.example.com/", token="...") as client:
        result = client.interface.get(415)
        print(result.value.data.title)
"""

from yapi.client.response import ApiResult
from yapi.client.transport import Transport, check_response, encode_query
from yapi.client.yapi_client import YapiClient, parse_base_url

__all__ = [
    "ApiResult",
    "Transport",
    "YapiClient",
    "check_response",
    "encode_query",
    "parse_base_url",
]
