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
from collections.abc import Callable, Mapping
from typing import Any, Optional

from esprovider import checks, exceptions
from esprovider.config import ProviderConfig
from esprovider.provider import Provider
from esprovider.state import State

LOG = logging.getLogger(__name__)

LICENSE_CONFIG = {
    "resource": {
        "elasticsearch_license": {
            "test": {
                "use_basic_license": "true",
            },
        },
    },
}

USER_CONFIG = {
    "resource": {
        "elasticsearch_user": {
            "test": {
                "username": "terraform-test",
                "enabled": "true",
                "email": "no@no.no",
                "full_name": "test",
                "password": "changeme",
                "roles": ["kibana_user"],
            },
        },
    },
}


@dataclasses.dataclass
class Step:
    config: Mapping[str, Any] | str
    check: Optional[checks.CheckFunc] = None


@dataclasses.dataclass
class AcceptanceCase:
    provider: Provider
    steps: list[Step]
    pre_check: Optional[Callable[[], None]] = None
    check_destroy: Optional[checks.CheckFunc] = None


def pre_check(cfg: ProviderConfig | None = None) -> None:
    """
    Verifies that acceptance tests can run at all.
    """
    if cfg is None:
        cfg = ProviderConfig()
        cfg.load_config()
    if not cfg.urls:
        raise exceptions.SystemSetupError("ELASTICSEARCH_URLS must be set for acceptance tests")


def run(case: AcceptanceCase) -> State:
    """
    Runs an acceptance case: pre-check, then apply and check each step, then destroy everything and check that it is gone.

    Resources are destroyed even if a step fails. In that case the step's error is raised and errors during destruction are
    only logged.

    :return: The state as it was before destruction.
    """
    if case.pre_check is not None:
        case.pre_check()

    state = State()
    try:
        for number, step in enumerate(case.steps, start=1):
            LOG.info("Applying step [%d] of [%d].", number, len(case.steps))
            case.provider.apply(step.config, state)
            if step.check is not None:
                step.check(state)
    except Exception:
        try:
            _destroy(case, state)
        except Exception:
            LOG.exception("Could not clean up after failed step. Remaining state: %s", state)
        raise
    return _destroy(case, state)


def _destroy(case: AcceptanceCase, state: State) -> State:
    # destroy checks need to enumerate the resources that have just been destroyed
    destroyed = state.copy()
    case.provider.destroy(state)
    if case.check_destroy is not None:
        case.check_destroy(destroyed)
    return destroyed


def _on_demand(provider: Provider, make_check: Callable[[Any], checks.CheckFunc]) -> checks.CheckFunc:
    # the provider connects on first use, which must not happen before the pre-check
    def check(state: State) -> None:
        make_check(provider.meta())(state)

    return check


def license_case(provider: Provider, cfg: ProviderConfig | None = None) -> AcceptanceCase:
    return AcceptanceCase(
        provider=provider,
        pre_check=lambda: pre_check(cfg if cfg is not None else provider.cfg),
        check_destroy=_on_demand(provider, lambda handle: checks.resource_destroyed(handle, "elasticsearch_license")),
        steps=[
            Step(
                config=LICENSE_CONFIG,
                check=_on_demand(provider, lambda handle: checks.compose(checks.resource_exists(handle, "elasticsearch_license.test"))),
            ),
        ],
    )


def user_case(provider: Provider, cfg: ProviderConfig | None = None) -> AcceptanceCase:
    return AcceptanceCase(
        provider=provider,
        pre_check=lambda: pre_check(cfg if cfg is not None else provider.cfg),
        check_destroy=_on_demand(provider, lambda handle: checks.resource_destroyed(handle, "elasticsearch_user")),
        steps=[
            Step(
                config=USER_CONFIG,
                check=_on_demand(provider, lambda handle: checks.compose(checks.resource_exists(handle, "elasticsearch_user.test"))),
            ),
        ],
    )
