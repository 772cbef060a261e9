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

import copy
import dataclasses
import enum
import json
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from esprovider import exceptions
from esprovider.utils import convert


class Kind(enum.Enum):
    STRING = "string"
    BOOL = "bool"
    LIST = "list"
    # a JSON document that is kept as (normalized) string
    JSON = "json"


@dataclasses.dataclass(frozen=True)
class Attribute:
    name: str
    kind: Kind = Kind.STRING
    required: bool = False
    default: Any = None
    computed: bool = False
    sensitive: bool = False
    force_new: bool = False

    def parse(self, value: Any, resource_type: str) -> Any:
        try:
            if self.kind is Kind.BOOL:
                return convert.to_bool(value)
            elif self.kind is Kind.LIST:
                if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
                    raise ValueError(f"expected a list but got [{value!r}]")
                return [str(v) for v in value]
            elif self.kind is Kind.JSON:
                return normalize_json(value)
            else:
                if isinstance(value, (dict, list, tuple)):
                    raise ValueError(f"expected a string but got [{value!r}]")
                return str(value)
        except ValueError as e:
            raise exceptions.ConfigError(f"Invalid value for [{resource_type}.{self.name}]: {e}", e) from None


def normalize_json(value: Any) -> str:
    if isinstance(value, str):
        value = json.loads(value)
    return json.dumps(value, sort_keys=True)


class Schema:
    def __init__(self, *attributes: Attribute, rules: Sequence[Callable[[str, Mapping[str, Any]], None]] = ()):
        self.attributes = {a.name: a for a in attributes}
        # checks that span several attributes, run after each attribute has been parsed
        self.rules = tuple(rules)

    @property
    def configurable(self) -> list[Attribute]:
        return [a for a in self.attributes.values() if not a.computed]

    def validate(self, resource_type: str, raw: Mapping[str, Any]) -> dict[str, Any]:
        """
        Checks the declared attributes of a resource and converts them to their canonical representation.

        :param resource_type: The resource type (only used in error messages).
        :param raw: The attributes as declared in the configuration.
        :return: A dict with a value (possibly the default) for every configurable attribute.
        """
        known = {a.name for a in self.configurable}
        unknown = sorted(set(raw) - known)
        if unknown:
            raise exceptions.ConfigError(f"Unsupported argument(s) {unknown} for [{resource_type}].")
        values = {}
        for attr in self.configurable:
            value = raw.get(attr.name)
            if value is not None:
                values[attr.name] = attr.parse(value, resource_type)
            elif attr.required:
                raise exceptions.ConfigError(f"The argument [{attr.name}] is required for [{resource_type}].")
            else:
                values[attr.name] = copy.deepcopy(attr.default)
        for rule in self.rules:
            rule(resource_type, values)
        return values

    def changed(self, current: Mapping[str, Any], desired: Mapping[str, Any]) -> list[str]:
        return [a.name for a in self.configurable if current.get(a.name) != desired.get(a.name)]

    def requires_replacement(self, current: Mapping[str, Any], desired: Mapping[str, Any]) -> bool:
        return any(self.attributes[name].force_new for name in self.changed(current, desired))

    def masked(self, values: Mapping[str, Any]) -> dict[str, Any]:
        """
        :return: A copy of ``values`` that is safe to log.
        """
        return {k: "*****" if k in self.attributes and self.attributes[k].sensitive and v is not None else v for k, v in values.items()}


class ResourceData:
    """
    The ID and attributes of a single resource instance, as seen by the resource's lifecycle functions.
    """

    def __init__(self, id="", attributes=None):
        self.id = id
        self.attributes = dict(attributes) if attributes else {}

    def get(self, name, default=None):
        return self.attributes.get(name, default)

    def set(self, name, value):
        self.attributes[name] = value


LifecycleFunc = Callable[[Any, ResourceData], None]


@dataclasses.dataclass(frozen=True)
class Resource:
    type_name: str
    schema: Schema
    create: LifecycleFunc
    read: LifecycleFunc
    update: LifecycleFunc
    delete: LifecycleFunc


def ensure_success(result, message):
    if not result.success:
        raise exceptions.RemoteMismatchError(f"{message}: {result.detail}", status=result.status, body=result.body)


def body_of(result) -> dict:
    return result.body if isinstance(result.body, dict) else {}
