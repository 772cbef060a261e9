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
from typing import Any


@dataclasses.dataclass
class InstanceState:
    id: str = ""
    attributes: dict[str, Any] = dataclasses.field(default_factory=dict)


@dataclasses.dataclass
class ResourceState:
    type: str
    name: str
    primary: InstanceState = dataclasses.field(default_factory=InstanceState)

    @property
    def address(self) -> str:
        return address_of(self.type, self.name)


@dataclasses.dataclass
class ModuleState:
    # insertion order is creation order
    resources: dict[str, ResourceState] = dataclasses.field(default_factory=dict)

    def of_type(self, resource_type: str) -> list[ResourceState]:
        return [r for r in self.resources.values() if r.type == resource_type]


class State:
    """
    Applied state. Only a root module is modelled.
    """

    def __init__(self, root: ModuleState | None = None):
        self.root = root if root is not None else ModuleState()

    def root_module(self) -> ModuleState:
        return self.root

    def copy(self) -> "State":
        return State(copy.deepcopy(self.root))

    def empty(self) -> bool:
        return not self.root.resources

    def __repr__(self):
        return f"State[{', '.join(self.root.resources)}]"


def address_of(resource_type: str, name: str) -> str:
    return f"{resource_type}.{name}"
