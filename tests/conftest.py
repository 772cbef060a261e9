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
import re

import pytest
from pytest_httpserver import HTTPServer
from werkzeug import Request, Response

from esprovider.client import client_for
from esprovider.client.synchronous import ProviderElasticsearch
from esprovider.config import ProviderConfig
from esprovider.provider import Provider

VERSIONS = {
    6: "6.8.23",
    7: "7.17.9",
}

BASIC_LICENSE_UID = "893361dc-9749-4997-93cb-802e3d7fa4a8"


class FakeCluster:
    """
    Serves the license and security APIs of a single-node Elasticsearch 6.x or 7.x cluster from memory.
    """

    def __init__(self, major):
        self.major = major
        self.version = VERSIONS[major]
        if major == 6:
            self.license_root, self.user_root = "/_xpack/license", "/_xpack/security/user/"
        else:
            self.license_root, self.user_root = "/_license", "/_security/user/"
        self.license = {"uid": BASIC_LICENSE_UID, "type": "basic", "status": "active"}
        self.users = {}
        self.requests = []
        # failure injection
        self.fail_start_basic = False
        self.keep_users_on_delete = False
        self.keep_license_on_delete = False
        self.get_user_status = None

    def url(self, server: HTTPServer):
        return f"http://{server.host}:{server.port}"

    def license_path(self, action=""):
        return f"{self.license_root}{action}"

    def user_path(self, username):
        return f"{self.user_root}{username}"

    def calls(self, method, path):
        return [args for m, p, args in self.requests if m == method and p == path]

    def dispatch(self, request: Request) -> Response:
        raw = request.get_data(as_text=True)
        body = json.loads(raw) if raw else None
        path = request.path
        self.requests.append((request.method, path, dict(request.args)))
        if path == "/":
            return self._json(200, {"name": "fake", "version": {"number": self.version, "build_flavor": "default", "build_hash": "abc"}})
        if path == "/_cluster/health":
            return self._json(200, {"cluster_name": "fake", "status": "green", "number_of_nodes": 1})
        if path.startswith(self.license_path()):
            return self._license(request.method, path[len(self.license_path()) :], body)
        if path.startswith(self.user_path("")):
            return self._user(request.method, path[len(self.user_path("")) :], body)
        return self._error(400, "illegal_argument_exception", f"no handler found for uri [{path}] and method [{request.method}]")

    def _license(self, method, action, body):
        if action == "/start_basic" and method == "POST":
            if self.fail_start_basic:
                return self._error(500, "exception", "cannot start basic license")
            if self.license is not None and self.license["type"] == "basic":
                return self._json(
                    200, {"acknowledged": True, "basic_was_started": False, "error_message": "Operation failed: Current license is basic."}
                )
            self.license = {"uid": BASIC_LICENSE_UID, "type": "basic", "status": "active"}
            return self._json(200, {"acknowledged": True, "basic_was_started": True})
        if action == "":
            if method == "GET":
                if self.license is None:
                    return self._json(404, {})
                return self._json(200, {"license": self.license})
            if method == "PUT":
                doc = body["licenses"][0]
                if doc.get("signature") == "invalid":
                    return self._json(200, {"acknowledged": True, "license_status": "invalid"})
                self.license = {"uid": doc["uid"], "type": doc["type"], "status": "active"}
                return self._json(200, {"acknowledged": True, "license_status": "valid"})
            if method == "DELETE":
                if not self.keep_license_on_delete:
                    self.license = None
                return self._json(200, {"acknowledged": True})
        return self._error(405, "exception", f"Incorrect HTTP method [{method}] for license action [{action}]")

    def _user(self, method, username, body):
        if method == "GET":
            if self.get_user_status is not None:
                return self._error(self.get_user_status, "security_exception", "action [cluster:admin/xpack/security/user/get] is unauthorized")
            if username not in self.users:
                return self._json(404, {})
            return self._json(200, {username: self.users[username]})
        if method in ("PUT", "POST"):
            created = username not in self.users
            user = {k: v for k, v in body.items() if k not in ("password", "password_hash")}
            user["username"] = username
            user.setdefault("enabled", True)
            user.setdefault("roles", [])
            user.setdefault("metadata", {})
            self.users[username] = user
            return self._json(200, {"created": created})
        if method == "DELETE":
            if username not in self.users:
                return self._json(404, {"found": False})
            if not self.keep_users_on_delete:
                del self.users[username]
            return self._json(200, {"found": True})
        return self._error(405, "exception", f"Incorrect HTTP method [{method}] for user [{username}]")

    @staticmethod
    def _json(status, body):
        return Response(json.dumps(body), status=status, mimetype="application/json")

    @classmethod
    def _error(cls, status, error_type, reason):
        return cls._json(
            status, {"error": {"root_cause": [{"type": error_type, "reason": reason}], "type": error_type, "reason": reason}, "status": status}
        )


@pytest.fixture(params=[6, 7], ids=["es6", "es7"])
def cluster(request, httpserver: HTTPServer) -> FakeCluster:
    fake = FakeCluster(request.param)
    httpserver.expect_request(re.compile(r"^/.*$")).respond_with_handler(fake.dispatch)
    return fake


@pytest.fixture
def es(cluster: FakeCluster, httpserver: HTTPServer) -> ProviderElasticsearch:
    return ProviderElasticsearch(hosts=[cluster.url(httpserver)], distribution_version=cluster.version, max_retries=0)


@pytest.fixture
def handle(es: ProviderElasticsearch):
    return client_for(es)


@pytest.fixture
def clean_env(tmp_path, monkeypatch):
    monkeypatch.setenv("ESPROVIDER_HOME", str(tmp_path))
    for name in ("ELASTICSEARCH_URLS", "ELASTICSEARCH_USERNAME", "ELASTICSEARCH_PASSWORD", "ELASTICSEARCH_INSECURE", "ELASTICSEARCH_CACERT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def provider_config(clean_env, cluster: FakeCluster, httpserver: HTTPServer) -> ProviderConfig:
    cfg = ProviderConfig()
    cfg.urls = cluster.url(httpserver)
    cfg.retry = 0
    cfg.wait_before_retry = 0
    return cfg


@pytest.fixture
def provider(provider_config: ProviderConfig) -> Provider:
    return Provider(provider_config)
