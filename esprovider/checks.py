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

import dataclasses
import logging
from collections.abc import Callable
from typing import Any, Optional

from esprovider import exceptions
from esprovider.client import Operation, Outcome, dispatch
from esprovider.resource import license, user
from esprovider.state import ResourceState, State

LOG = logging.getLogger(__name__)

CheckFunc = Callable[[State], None]


@dataclasses.dataclass(frozen=True)
class CheckedResource:
    """How to look up a resource of a given type on the cluster."""

    kind: str
    get: Operation
    arguments: Callable[[ResourceState], dict[str, Any]]
    # invoked when a destroyed resource is confirmed absent
    on_absent: Optional[Callable[[Any], None]] = None


def force_basic_license(handle) -> None:
    """
    Reverts the cluster to the basic license so that subsequent tests start from a known license state. Activating the basic
    license on a cluster that already runs on it succeeds as well.

    :param handle: The client handle.
    """
    message = "Error when enabling basic license for other tests. You need to check the cluster's license manually"
    try:
        result = dispatch(handle, Operation.ACTIVATE_BASIC_LICENSE)
    except exceptions.TransientError as e:
        raise exceptions.BaselineRestoreFailed(f"{message}.", e) from e
    if not result.success:
        raise exceptions.BaselineRestoreFailed(f"{message}: {result.detail}")
    LOG.info("Basic license is active (started: [%s]).", result.body.get("basic_was_started") if isinstance(result.body, dict) else None)


CHECKED_RESOURCES: dict[str, CheckedResource] = {
    license.TYPE: CheckedResource("license", Operation.GET_LICENSE, lambda rs: {}, on_absent=force_basic_license),
    user.TYPE: CheckedResource("user", Operation.GET_USER, lambda rs: {"username": rs.primary.id}),
}


def _checked_resource(resource_type: str) -> CheckedResource:
    try:
        return CHECKED_RESOURCES[resource_type]
    except KeyError:
        raise exceptions.ConfigError(f"No lifecycle checks available for resource type [{resource_type}].") from None


def compose(*checks: CheckFunc) -> CheckFunc:
    """
    Combines multiple checks into one. Checks run in order and the first failure ends the run.
    """

    def check(state: State) -> None:
        for c in checks:
            c(state)

    return check


def resource_exists(handle, address: str) -> CheckFunc:
    """
    :param handle: The client handle used to look up the resource.
    :param address: The resource address, e.g. ``elasticsearch_user.test``.
    :return: A check that passes iff ``address`` is in state with a non-empty ID and the cluster returns it.
    """

    def check(state: State) -> None:
        rs = state.root_module().resources.get(address)
        if rs is None:
            raise exceptions.StateLookupError(f"Not found: {address}")
        checked = _checked_resource(rs.type)
        if not rs.primary.id:
            raise exceptions.StateLookupError(f"No {checked.kind} ID is set for {address}")

        result = dispatch(handle, checked.get, **checked.arguments(rs))
        if not result.success:
            raise exceptions.RemoteMismatchError(
                f"Error when get {checked.kind} {rs.primary.id}: {result.detail}", status=result.status, body=result.body
            )

    return check


def resource_destroyed(handle, resource_type: str) -> CheckFunc:
    """
    :param handle: The client handle used to look up the resources.
    :param resource_type: The resource type to check, e.g. ``elasticsearch_user``.
    :return: A check that passes iff none of the resources of ``resource_type`` in state exists on the cluster anymore.
    """

    def check(state: State) -> None:
        checked = _checked_resource(resource_type)
        for rs in state.root_module().of_type(resource_type):
            result = dispatch(handle, checked.get, **checked.arguments(rs))
            if result.outcome is Outcome.NOT_FOUND:
                LOG.debug("%s [%s] has been destroyed.", checked.kind, rs.primary.id)
                if checked.on_absent is not None:
                    checked.on_absent(handle)
            elif result.outcome is Outcome.SUCCESS:
                raise exceptions.ResourceStillExists(f"{checked.kind.capitalize()} {rs.primary.id!r} still exists", resource_id=rs.primary.id)
            else:
                raise exceptions.RemoteMismatchError(
                    f"Cannot determine whether {checked.kind} {rs.primary.id} has been destroyed: {result.detail}",
                    status=result.status,
                    body=result.body,
                )

    return check
