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

import abc
import dataclasses
import enum
import json
import logging
from typing import Any

import elastic_transport
import elasticsearch

from esprovider import exceptions
from esprovider.client.common import quote
from esprovider.utils import versions


class Outcome(enum.Enum):
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclasses.dataclass(frozen=True)
class Result:
    """Normalized result of a single admin call."""

    outcome: Outcome
    status: int
    body: Any = None

    @property
    def success(self) -> bool:
        return self.outcome is Outcome.SUCCESS

    @property
    def not_found(self) -> bool:
        return self.outcome is Outcome.NOT_FOUND

    @property
    def detail(self) -> str:
        if isinstance(self.body, (dict, list)):
            return json.dumps(self.body)
        return str(self.body)


class Operation(enum.Enum):
    GET_LICENSE = "get_license"
    PUT_LICENSE = "put_license"
    DELETE_LICENSE = "delete_license"
    ACTIVATE_BASIC_LICENSE = "activate_basic_license"
    GET_USER = "get_user"
    PUT_USER = "put_user"
    DELETE_USER = "delete_user"


class AdminClient(abc.ABC):
    """
    Administrative API of a single Elasticsearch major version. Concrete variants only differ in the REST surface they address.
    """

    def __init__(self, es, distribution_version=None):
        self.es = es
        self.distribution_version = distribution_version
        self.logger = logging.getLogger(__name__)

    @abc.abstractmethod
    def license_path(self, action=None) -> str:
        pass

    @abc.abstractmethod
    def user_path(self, username) -> str:
        pass

    def get_license(self) -> Result:
        return self._request("GET", self.license_path())

    def put_license(self, license) -> Result:
        return self._request("PUT", self.license_path(), params={"acknowledge": True}, body={"licenses": [license]})

    def delete_license(self) -> Result:
        return self._request("DELETE", self.license_path())

    def activate_basic_license(self) -> Result:
        return self._request("POST", self.license_path("start_basic"), params={"acknowledge": True})

    def get_user(self, username) -> Result:
        return self._request("GET", self.user_path(username))

    def put_user(self, username, user) -> Result:
        return self._request("PUT", self.user_path(username), body=user)

    def delete_user(self, username) -> Result:
        return self._request("DELETE", self.user_path(username))

    def _request(self, method, path, params=None, body=None) -> Result:
        request_params = {"pretty": True}
        if params:
            request_params.update(params)
        self.logger.debug("%s [%s] on Elasticsearch [%s].", method, path, self.distribution_version)
        try:
            response = self.es.perform_request(method, path, params=request_params, body=body)
        except elasticsearch.NotFoundError as e:
            return Result(Outcome.NOT_FOUND, e.meta.status, e.body)
        except elasticsearch.ApiError as e:
            self.logger.warning("%s [%s] failed with status [%s].", method, path, e.meta.status)
            return Result(Outcome.ERROR, e.meta.status, e.body)
        except elastic_transport.TransportError as e:
            raise exceptions.TransientError(f"Could not {method} [{path}]: {e}", e) from e
        return Result(Outcome.SUCCESS, response.meta.status, response.body)

    def __repr__(self):
        return f"{type(self).__name__}[{self.distribution_version}]"


class V6Client(AdminClient):
    """Elasticsearch 6.x, where the license and security APIs live below ``_xpack``."""

    def license_path(self, action=None) -> str:
        if action:
            return f"/_xpack/license/{action}"
        return "/_xpack/license"

    def user_path(self, username) -> str:
        return f"/_xpack/security/user/{quote(username)}"


class V7Client(AdminClient):
    def license_path(self, action=None) -> str:
        if action:
            return f"/_license/{action}"
        return "/_license"

    def user_path(self, username) -> str:
        return f"/_security/user/{quote(username)}"


SUPPORTED_CLIENTS = (V6Client, V7Client)

_CLIENTS_BY_MAJOR = {
    6: V6Client,
    7: V7Client,
}


def client_for(es, distribution_version=None) -> AdminClient:
    """
    Creates the client handle matching the major version of the target cluster.

    :param es: A configured ``ProviderElasticsearch`` instance.
    :param distribution_version: The cluster's version number. Defaults to the version that ``es`` has been created with.
    :return: A ``V6Client`` or ``V7Client``.
    """
    if distribution_version is None:
        distribution_version = getattr(es, "distribution_version", None)
    if not versions.is_version_identifier(distribution_version):
        raise exceptions.UnsupportedVersion(f"Cannot determine the Elasticsearch major version from [{distribution_version}].")
    major = versions.major_version(distribution_version)
    try:
        client_class = _CLIENTS_BY_MAJOR[major]
    except KeyError:
        raise exceptions.UnsupportedVersion(
            f"Elasticsearch [{distribution_version}] is not supported. Supported major versions are {sorted(_CLIENTS_BY_MAJOR)}."
        ) from None
    return client_class(es, distribution_version)


def dispatch(handle, operation: Operation, **kwargs) -> Result:
    """
    Performs a logical admin operation against the REST surface of the handle's Elasticsearch version.

    :param handle: A client handle as returned by ``client_for``.
    :param operation: The operation to perform.
    :param kwargs: Operation specific arguments, e.g. ``username`` for ``Operation.GET_USER``.
    :return: A normalized ``Result``. Raises ``UnsupportedVersion`` for any handle that is not a supported variant and
             ``TransientError`` if no response has been received.
    """
    if not isinstance(handle, SUPPORTED_CLIENTS):
        raise exceptions.UnsupportedVersion(
            f"Operation [{operation.value}] is only supported by Elasticsearch 6.x and 7.x clients but got [{type(handle).__name__}]."
        )
    return getattr(handle, operation.value)(**kwargs)
