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

from esprovider.state import InstanceState, ModuleState, ResourceState, State, address_of


class TestState:
    def test_empty_state(self):
        state = State()
        assert state.empty()
        assert state.root_module().resources == {}
        assert repr(state) == "State[]"

    def test_copy_is_independent(self):
        rs = ResourceState("elasticsearch_user", "test", InstanceState("terraform-test", {"roles": ["kibana_user"]}))
        state = State(ModuleState({rs.address: rs}))

        copied = state.copy()
        state.root_module().resources.clear()
        rs.primary.attributes["roles"].append("superuser")

        assert state.empty()
        assert not copied.empty()
        assert copied.root_module().resources["elasticsearch_user.test"].primary.attributes["roles"] == ["kibana_user"]

    def test_resources_of_type_in_creation_order(self):
        module = ModuleState()
        for rs in (
            ResourceState("elasticsearch_user", "b"),
            ResourceState("elasticsearch_license", "test"),
            ResourceState("elasticsearch_user", "a"),
        ):
            module.resources[rs.address] = rs

        assert [rs.name for rs in module.of_type("elasticsearch_user")] == ["b", "a"]
        assert address_of("elasticsearch_user", "a") == "elasticsearch_user.a"
