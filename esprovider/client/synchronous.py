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

from elastic_transport import (
    ApiResponse,
    ListApiResponse,
    ObjectApiResponse,
    TextApiResponse,
)
from elasticsearch import Elasticsearch
from elasticsearch.exceptions import HTTP_EXCEPTIONS, ApiError

from esprovider.client.common import ensure_mimetype_headers, quote_query


class ProviderElasticsearch(Elasticsearch):
    """
    Elasticsearch client that can talk to 6.x and 7.x clusters.

    The 8.x client verifies the product via the ``X-Elastic-Product`` header, which clusters before 7.14.0 do not send, and it
    requests compatibility mimetypes, which older clusters reject. Requests are therefore handed to the transport directly.
    """

    def __init__(self, hosts: Any = None, *, distribution_version: str | None = None, distribution_flavor: str | None = None, **kwargs):
        super().__init__(hosts, **kwargs)
        self.distribution_version = distribution_version
        self.distribution_flavor = distribution_flavor

    def options(self, *args, **kwargs):
        new_self = super().options(*args, **kwargs)
        new_self.distribution_version = self.distribution_version
        new_self.distribution_flavor = self.distribution_flavor
        return new_self

    def perform_request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        body: Optional[Any] = None,
        endpoint_id: Optional[str] = None,
        path_parts: Optional[Mapping[str, Any]] = None,
    ) -> ApiResponse[Any]:
        request_headers = self._headers.copy()
        request_headers.update(ensure_mimetype_headers(headers, body))
        target = f"{path}?{quote_query(params)}" if params else path

        meta, resp_body = self.transport.perform_request(
            method,
            target,
            headers=request_headers,
            body=body,
            request_timeout=self._request_timeout,
            max_retries=self._max_retries,
            retry_on_status=self._retry_on_status,
            retry_on_timeout=self._retry_on_timeout,
            client_meta=self._client_meta,
        )

        if not 200 <= meta.status < 300:
            raise HTTP_EXCEPTIONS.get(meta.status, ApiError)(message=_error_message(resp_body), meta=meta, body=resp_body)

        if isinstance(resp_body, dict):
            return ObjectApiResponse(body=resp_body, meta=meta)
        elif isinstance(resp_body, list):
            return ListApiResponse(body=resp_body, meta=meta)
        elif isinstance(resp_body, str):
            return TextApiResponse(body=resp_body, meta=meta)
        return ApiResponse(body=resp_body, meta=meta)


def _error_message(body: Any) -> str:
    # Elasticsearch errors look like {"error": {"type": "...", "reason": "..."}, "status": 404}
    if isinstance(body, dict) and "error" in body:
        error = body["error"]
        if isinstance(error, dict) and "type" in error:
            return str(error["type"])
        return str(error)
    return str(body)
