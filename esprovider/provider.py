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
from collections.abc import Mapping
from typing import Any

import elastic_transport
import elasticsearch

from esprovider import exceptions
from esprovider.client import (
    EsClientFactory,
    client_for,
    cluster_distribution_version,
    wait_for_rest_layer,
)
from esprovider.config import ProviderConfig
from esprovider.resource import RESOURCES, Resource, ResourceData
from esprovider.state import InstanceState, ResourceState, State, address_of


def parse_config(config: Mapping[str, Any] | str) -> dict[str, tuple[str, str, dict[str, Any]]]:
    """
    Parses a declarative configuration in Terraform's JSON syntax, e.g.::

        {"resource": {"elasticsearch_license": {"test": {"use_basic_license": "true"}}}}

    ``resource`` may also be a list of such mappings.

    :param config: The configuration as ``dict`` or JSON string.
    :return: A dict of resource address to a tuple of resource type, resource name and declared attributes, in declaration order.
    """
    if isinstance(config, str):
        try:
            config = json.loads(config)
        except ValueError as e:
            raise exceptions.ConfigError(f"Configuration is not valid JSON: {e}", e) from None
    if not isinstance(config, Mapping):
        raise exceptions.ConfigError(f"Configuration must be an object but got [{type(config).__name__}].")

    blocks = config.get("resource", [])
    if isinstance(blocks, Mapping):
        blocks = [blocks]

    declared = {}
    for block in blocks:
        for resource_type, instances in block.items():
            for name, attributes in instances.items():
                address = address_of(resource_type, name)
                if address in declared:
                    raise exceptions.ConfigError(f"Duplicate resource [{address}].")
                declared[address] = (resource_type, name, dict(attributes or {}))
    return declared


class Provider:
    """
    Applies declarative configurations of Elasticsearch administrative resources.

    The client handle is created once by ``configure()`` (or passed in directly) and reused for every resource operation.
    """

    def __init__(self, cfg: ProviderConfig | None = None, handle=None, client_factory_class=EsClientFactory, resources=None):
        if cfg is None:
            cfg = ProviderConfig()
            cfg.load_config()
        self.cfg = cfg
        self._handle = handle
        self.client_factory_class = client_factory_class
        self.resources: dict[str, Resource] = resources if resources is not None else RESOURCES
        self.logger = logging.getLogger(__name__)

    def configure(self):
        urls = self.cfg.urls
        if not urls:
            raise exceptions.SystemSetupError("No Elasticsearch URL configured. Please set ELASTICSEARCH_URLS.")
        es = self.client_factory_class(urls, self.cfg.client_options()).create()
        try:
            if not wait_for_rest_layer(es, max_attempts=self.cfg.retry, wait_before_retry=self.cfg.wait_before_retry):
                raise exceptions.SystemSetupError(f"Elasticsearch REST API at {list(urls)} is not available.")
            distribution_flavor, distribution_version, _ = cluster_distribution_version(es)
        except (elasticsearch.ApiError, elastic_transport.TransportError) as e:
            raise exceptions.SystemSetupError(f"Could not connect to Elasticsearch at {list(urls)}: {e}", e) from e
        es.distribution_version = distribution_version
        es.distribution_flavor = distribution_flavor
        self._handle = client_for(es, distribution_version)
        self.logger.info("Connected to Elasticsearch [%s] (flavor [%s]) using [%s].", distribution_version, distribution_flavor, self._handle)
        return self._handle

    def meta(self):
        """
        :return: The client handle, configuring the provider on first use.
        """
        if self._handle is None:
            self.configure()
        return self._handle

    def resource(self, resource_type: str) -> Resource:
        try:
            return self.resources[resource_type]
        except KeyError:
            raise exceptions.ConfigError(f"Unsupported resource type [{resource_type}].") from None

    def apply(self, config, state: State | None = None) -> State:
        """
        Brings remote resources in line with ``config``. ``state`` is updated in place after each resource operation, so it
        also reflects what has been done if an operation fails.

        :param config: A declarative configuration (see ``parse_config``).
        :param state: The state of a previous apply. Defaults to an empty state.
        :return: The updated state.
        """
        if state is None:
            state = State()
        declared = parse_config(config)
        # validate everything before touching the cluster
        desired = {}
        for address, (resource_type, name, attributes) in declared.items():
            desired[address] = (resource_type, name, self.resource(resource_type).schema.validate(resource_type, attributes))

        module = state.root_module()
        for address in reversed(list(module.resources)):
            if address not in desired:
                self._delete(module.resources[address])
                del module.resources[address]

        handle = self.meta()
        for address, (resource_type, name, values) in desired.items():
            resource = self.resource(resource_type)
            self.logger.debug("Desired attributes of [%s]: %s", address, resource.schema.masked(values))
            current = module.resources.get(address)
            if current is None:
                self.logger.info("Creating [%s].", address)
                data = ResourceData(attributes=values)
                resource.create(handle, data)
            elif resource.schema.requires_replacement(current.primary.attributes, values):
                self.logger.info("Replacing [%s].", address)
                self._delete(current)
                del module.resources[address]
                data = ResourceData(attributes=values)
                resource.create(handle, data)
            elif resource.schema.changed(current.primary.attributes, values):
                self.logger.info("Updating [%s].", address)
                data = ResourceData(current.primary.id, {**current.primary.attributes, **values})
                resource.update(handle, data)
            else:
                data = ResourceData(current.primary.id, current.primary.attributes)
            if not data.id:
                raise exceptions.RemoteMismatchError(f"[{address}] does not exist after it has been applied.")
            module.resources[address] = ResourceState(resource_type, name, InstanceState(data.id, data.attributes))
        return state

    def refresh(self, state: State) -> State:
        """
        Reads every resource in ``state`` from the cluster and drops those that do not exist anymore.
        """
        handle = self.meta()
        module = state.root_module()
        for address, rs in list(module.resources.items()):
            data = ResourceData(rs.primary.id, rs.primary.attributes)
            self.resource(rs.type).read(handle, data)
            if data.id:
                rs.primary = InstanceState(data.id, data.attributes)
            else:
                del module.resources[address]
        return state

    def destroy(self, state: State) -> State:
        """
        Deletes all resources in ``state`` in reverse creation order.
        """
        module = state.root_module()
        for address in reversed(list(module.resources)):
            self._delete(module.resources[address])
            del module.resources[address]
        return state

    def _delete(self, rs: ResourceState) -> None:
        self.logger.info("Destroying [%s] with ID [%s].", rs.address, rs.primary.id)
        self.resource(rs.type).delete(self.meta(), ResourceData(rs.primary.id, rs.primary.attributes))
