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

from esprovider.client import Operation, dispatch
from esprovider.resource.base import (
    Attribute,
    Kind,
    Resource,
    ResourceData,
    Schema,
    body_of,
    ensure_success,
    normalize_json,
)

TYPE = "elasticsearch_user"

SCHEMA = Schema(
    Attribute("username", required=True, force_new=True),
    Attribute("enabled", Kind.BOOL, default=True),
    Attribute("email"),
    Attribute("full_name"),
    Attribute("password", sensitive=True),
    Attribute("password_hash", sensitive=True),
    Attribute("roles", Kind.LIST, default=[]),
    Attribute("metadata", Kind.JSON, default="{}"),
)

LOG = logging.getLogger(__name__)


def _user_document(data: ResourceData) -> dict:
    doc = {
        "enabled": data.get("enabled", True),
        "roles": data.get("roles", []),
        "metadata": json.loads(data.get("metadata") or "{}"),
    }
    for key in ("email", "full_name", "password", "password_hash"):
        if data.get(key) is not None:
            doc[key] = data.get(key)
    return doc


def create(handle, data: ResourceData) -> None:
    username = data.get("username")
    result = dispatch(handle, Operation.PUT_USER, username=username, user=_user_document(data))
    ensure_success(result, f"Error when creating user {username}")
    data.id = username
    read(handle, data)


def read(handle, data: ResourceData) -> None:
    result = dispatch(handle, Operation.GET_USER, username=data.id)
    if result.not_found:
        LOG.warning("User [%s] not found, removing it from state.", data.id)
        data.id = ""
        return
    ensure_success(result, f"Error when getting user {data.id}")
    user = body_of(result).get(data.id, {})
    data.set("username", user.get("username", data.id))
    data.set("enabled", user.get("enabled", True))
    data.set("email", user.get("email"))
    data.set("full_name", user.get("full_name"))
    data.set("roles", list(user.get("roles", [])))
    data.set("metadata", normalize_json(user.get("metadata", {})))


def update(handle, data: ResourceData) -> None:
    result = dispatch(handle, Operation.PUT_USER, username=data.id, user=_user_document(data))
    ensure_success(result, f"Error when updating user {data.id}")
    read(handle, data)


def delete(handle, data: ResourceData) -> None:
    result = dispatch(handle, Operation.DELETE_USER, username=data.id)
    if result.not_found:
        LOG.warning("User [%s] not found, nothing to delete.", data.id)
        return
    ensure_success(result, f"Error when deleting user {data.id}")


RESOURCE = Resource(TYPE, SCHEMA, create=create, read=read, update=update, delete=delete)
