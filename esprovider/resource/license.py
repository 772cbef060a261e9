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

import json
import logging

from esprovider import exceptions
from esprovider.client import Operation, dispatch
from esprovider.resource.base import (
    Attribute,
    Kind,
    Resource,
    ResourceData,
    Schema,
    body_of,
    ensure_success,
)

TYPE = "elasticsearch_license"


def _require_license_source(resource_type, values) -> None:
    if not values.get("use_basic_license") and not values.get("license"):
        raise exceptions.ConfigError(f"One of [license] or [use_basic_license] must be set for [{resource_type}].")


SCHEMA = Schema(
    Attribute("license", Kind.JSON, sensitive=True),
    Attribute("use_basic_license", Kind.BOOL, default=False),
    Attribute("uid", computed=True),
    Attribute("license_type", computed=True),
    Attribute("status", computed=True),
    rules=[_require_license_source],
)

LOG = logging.getLogger(__name__)


def create(handle, data: ResourceData) -> None:
    if data.get("use_basic_license"):
        result = dispatch(handle, Operation.ACTIVATE_BASIC_LICENSE)
        ensure_success(result, "Error when enabling basic license")
        body = body_of(result)
        if not body.get("basic_was_started", False):
            LOG.info("Basic license has not been started: %s", body.get("error_message", "already active"))
    else:
        _require_license_source(TYPE, data.attributes)
        result = dispatch(handle, Operation.PUT_LICENSE, license=json.loads(data.get("license")))
        ensure_success(result, "Error when installing license")
        license_status = body_of(result).get("license_status", "valid")
        if license_status != "valid":
            raise exceptions.RemoteMismatchError(
                f"License has not been accepted (status [{license_status}]): {result.detail}", status=result.status, body=result.body
            )
    read(handle, data)


def read(handle, data: ResourceData) -> None:
    result = dispatch(handle, Operation.GET_LICENSE)
    if result.not_found:
        LOG.warning("No license installed, removing it from state.")
        data.id = ""
        return
    ensure_success(result, "Error when getting license")
    current = body_of(result).get("license", {})
    data.id = current.get("uid", "")
    data.set("uid", current.get("uid"))
    data.set("license_type", current.get("type"))
    data.set("status", current.get("status"))


def update(handle, data: ResourceData) -> None:
    create(handle, data)


def delete(handle, data: ResourceData) -> None:
    result = dispatch(handle, Operation.DELETE_LICENSE)
    if result.not_found:
        LOG.warning("License [%s] not found, nothing to delete.", data.id)
        return
    ensure_success(result, "Error when deleting license")


RESOURCE = Resource(TYPE, SCHEMA, create=create, read=read, update=update, delete=delete)
