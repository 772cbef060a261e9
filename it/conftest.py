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

import os

import pytest

from esprovider import log
from esprovider.provider import Provider


def pytest_collection_modifyitems(config, items):
    if os.environ.get("ELASTICSEARCH_URLS"):
        return
    skip = pytest.mark.skip(reason="ELASTICSEARCH_URLS must be set for acceptance tests")
    it_dir = os.path.dirname(__file__)
    for item in items:
        if str(item.path).startswith(it_dir + os.sep):
            item.add_marker(skip)


@pytest.fixture(scope="session", autouse=True)
def logging_config():
    log.install_default_log_config()
    log.configure_logging()


@pytest.fixture
def provider() -> Provider:
    return Provider()
