# Licensed to Elasticsearch B.V. under one or more contributor
# license agreements. See the NOTICE file distributed with
# this work for additional information regarding copyright
# ownership. Elasticsearch B.V. licenses this file to you under
# the Apache License, Version 2.0 (the "License"); you may
# not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# 	http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing,
# software distributed under the License is distributed on an
# "AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY
# KIND, either express or implied.  See the License for the
# specific language governing permissions and limitations
# under the License.

from collections.abc import Mapping
from typing import Any, Optional

from elastic_transport.client_utils import percent_encode

JSON_MIMETYPE = "application/json"


def ensure_mimetype_headers(headers: Optional[Mapping[str, str]], body: Optional[Any]) -> dict[str, str]:
    """
    6.x clusters reject request bodies without a content type and neither 6.x nor 7.x understand the compatibility mimetypes
    that the 8.x client negotiates by default. Requests therefore always declare plain JSON.
    """
    request_headers = dict(headers) if headers else {}
    request_headers.setdefault("accept", JSON_MIMETYPE)
    if body is not None:
        request_headers.setdefault("content-type", JSON_MIMETYPE)
    return request_headers


def to_param(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(to_param(v) for v in value)
    return str(value)


def quote(value: Any) -> str:
    # '/' is escaped so that a value always stays within a single path segment
    return percent_encode(to_param(value), ",*")


def quote_query(params: Mapping[str, Any]) -> str:
    return "&".join(f"{k}={quote(v)}" for k, v in params.items())
