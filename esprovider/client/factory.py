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

import logging
import time
from urllib.parse import urlsplit

import certifi
from urllib3.util.ssl_ import is_ipaddress

from esprovider import exceptions


class EsClientFactory:
    """
    Creates ``ProviderElasticsearch`` clients from a list of hosts and the client options that ``ProviderConfig.client_options()``
    produces. Hosts are either URLs or dicts with ``host`` and ``port`` (and optionally ``use_ssl``).
    """

    def __init__(self, hosts, client_options, distribution_version=None, distribution_flavor=None):
        self.hosts = [self._url(h, client_options) for h in hosts]
        self.client_options = dict(client_options)
        self.distribution_version = distribution_version
        self.distribution_flavor = distribution_flavor
        self.ssl_context = None
        self.logger = logging.getLogger(__name__)
        self.logger.info("Creating ES client connected to %s with options [%s]", self.hosts, self._masked(client_options))

        if self.client_options.pop("use_ssl", False) or any(h.startswith("https://") for h in self.hosts):
            self.ssl_context = self._create_ssl_context()
        else:
            self.logger.info("SSL support: off")
            self.client_options.pop("ca_certs", None)
            self.client_options.pop("verify_certs", None)

        user = self.client_options.pop("basic_auth_user", None)
        password = self.client_options.pop("basic_auth_password", None)
        if user:
            self.client_options["basic_auth"] = (user, password or "")
            self.logger.info("HTTP basic authentication: on")
        else:
            self.logger.info("HTTP basic authentication: off")

        if "timeout" in self.client_options:
            self.client_options["request_timeout"] = self.client_options.pop("timeout")

        # admin calls and checks report failures to the caller right away
        self.client_options.setdefault("max_retries", 0)
        self.client_options.setdefault("retry_on_timeout", False)

    @staticmethod
    def _url(host, client_options):
        if isinstance(host, str):
            return host.rstrip("/")
        scheme = "https" if client_options.get("use_ssl") or host.get("use_ssl") else "http"
        return f"{scheme}://{host['host']}:{host['port']}"

    @staticmethod
    def _masked(client_options):
        masked = dict(client_options)
        if "basic_auth_password" in masked:
            masked["basic_auth_password"] = "*****"
        if "basic_auth" in masked:
            masked["basic_auth"] = (masked["basic_auth"][0], "*****")
        return masked

    def _create_ssl_context(self):
        # pylint: disable=import-outside-toplevel
        import ssl

        self.logger.info("SSL support: on")
        ssl_context = ssl.create_default_context(ssl.Purpose.SERVER_AUTH, cafile=self.client_options.pop("ca_certs", certifi.where()))

        if self.client_options.pop("verify_certs", True):
            ssl_context.check_hostname = self._only_hostnames(self.hosts)
            ssl_context.verify_mode = ssl.CERT_REQUIRED
            self.logger.info("SSL certificate verification: on")
        else:
            # check_hostname has to be turned off before verify_mode can be relaxed
            ssl_context.check_hostname = False
            ssl_context.verify_mode = ssl.CERT_NONE
            # the client warns on every request unless it is told as well
            self.client_options["verify_certs"] = False
            self.client_options["ssl_show_warn"] = False
            self.logger.info("SSL certificate verification: off")
            self.logger.warning("User has enabled SSL but disabled certificate verification. This is dangerous.")
        return ssl_context

    @staticmethod
    def _only_hostnames(hosts):
        ips = [is_ipaddress(urlsplit(h).hostname or "") for h in hosts]
        if any(ips) and not all(ips):
            raise exceptions.SystemSetupError("Cannot verify certs with mixed IP addresses and hostnames")
        # certificates issued for IP addresses cannot be matched against a hostname
        return not any(ips)

    def create(self):
        # pylint: disable=import-outside-toplevel
        from esprovider.client.synchronous import ProviderElasticsearch

        return ProviderElasticsearch(
            hosts=self.hosts,
            distribution_version=self.distribution_version,
            distribution_flavor=self.distribution_flavor,
            ssl_context=self.ssl_context,
            **self.client_options,
        )


def wait_for_rest_layer(es, max_attempts=40, wait_before_retry=3):
    """
    Waits until the REST API of all nodes that ``es`` is configured with is available. Security may not be initialized yet
    right after a cluster has been started, so 401 is retried as well.

    :param es: Elasticsearch client to use for connecting.
    :param max_attempts: The maximum number of retries.
    :param wait_before_retry: The number of seconds to sleep between two attempts.
    :return: True iff Elasticsearch's REST API is available. Raises the last error if it is still not available after
             ``max_attempts`` retries.
    """
    # pylint: disable=import-outside-toplevel
    from elastic_transport import ConnectionError, TlsError, TransportError
    from elasticsearch import ApiError

    logger = logging.getLogger(__name__)
    expected_node_count = len(es.transport.node_pool)
    for attempt in range(1, max_attempts + 2):
        may_retry = attempt <= max_attempts
        try:
            # a RED cluster is fine as long as all nodes have joined
            es.cluster.health(wait_for_nodes=f">={expected_node_count}")
            logger.debug("REST API is available for >= [%s] nodes after [%s] attempts.", expected_node_count, attempt)
            return True
        except TlsError as e:
            raise exceptions.SystemSetupError("Could not connect to cluster via HTTPS. Are you sure this is an HTTPS endpoint?", e)
        except ConnectionError as e:
            if "ProtocolError" in str(e):
                raise exceptions.SystemSetupError("Received a protocol error. Are you sure you're using the correct scheme (HTTP or HTTPS)?", e)
            if not may_retry:
                raise
            logger.debug("Got connection error on attempt [%s]. Sleeping...", attempt)
        except TransportError as e:
            if not may_retry:
                raise
            logger.debug("Got transport error [%s] on attempt [%s]. Sleeping...", e, attempt)
        except ApiError as e:
            if e.meta.status not in (401, 408, 503) or not may_retry:
                logger.warning("Got unexpected status code [%s] on attempt [%s].", e.meta.status, attempt)
                raise
            logger.debug("Got status code [%s] on attempt [%s]. Sleeping...", e.meta.status, attempt)
        time.sleep(wait_before_retry)
    return False


def cluster_distribution_version(es):
    """
    :param es: Elasticsearch client to use for connecting.
    :return: A tuple of the cluster's build flavor, version number and build hash. Missing values default to the build flavor.
    """
    version = es.info()["version"]
    build_flavor = version.get("build_flavor", "oss")
    return build_flavor, version.get("number", build_flavor), version.get("build_hash", build_flavor)
