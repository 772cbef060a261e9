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

import configparser
import logging
import os.path
from enum import Enum
from string import Template
from typing import Literal, NamedTuple, Optional, Union

from esprovider import exceptions, paths
from esprovider.utils import convert, io


class Scope(Enum):
    # Valid for all invocations, typically read from the configuration file
    application = 1
    # Intended to allow overriding of values in the config file, e.g. from a test fixture
    applicationOverride = 2


Section = Literal["provider"]


Key = Literal[
    "provider.cacert_file",
    "provider.insecure",
    "provider.password",
    "provider.request_timeout",
    "provider.retry",
    "provider.urls",
    "provider.username",
    "provider.wait_before_retry",
]

Value = Union[int, float, str, bool]


def to_config_string(value: Value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class ConfigFile:
    """
    The provider's ini file, ``provider.ini`` (or ``provider-<name>.ini``) in the provider's config directory. ``${CONFIG_DIR}``
    in values expands to that directory.
    """

    def __init__(self, config_name=None):
        self.config_name = config_name

    @property
    def config_dir(self):
        return paths.provider_confdir()

    @property
    def location(self):
        file_name = f"provider-{self.config_name}.ini" if self.config_name else "provider.ini"
        return os.path.join(self.config_dir, file_name)

    @property
    def present(self):
        return os.path.isfile(self.location)

    def load(self) -> configparser.ConfigParser:
        with open(self.location, encoding="utf-8") as f:
            contents = Template(f.read()).safe_substitute(CONFIG_DIR=self.config_dir)
        parser = configparser.ConfigParser()
        parser.read_string(contents, source=self.location)
        return parser

    def store(self, config: configparser.ConfigParser):
        io.ensure_dir(self.config_dir)
        with open(self.location, "w", encoding="utf-8") as f:
            config.write(f)


class _ConfigKey(NamedTuple):
    scope: Scope
    section: Section
    key: Key


class Config:
    """
    Properties by section and key. The same property can be set in several scopes; lookups return the value of the most
    specific scope that has one.
    """

    def __init__(self, config_name=None, config_file_class=ConfigFile):
        self.name = config_name
        self.config_file = config_file_class(config_name)
        self._opts: dict[_ConfigKey, str] = {}

    def add(self, scope: Optional[Scope], section: Section, key: Key, value: Value):
        """
        Sets a property in ``scope`` (``Scope.application`` if ``None``), replacing a previous value in the same scope.
        """
        self._opts[_ConfigKey(scope or Scope.application, section, key)] = to_config_string(value)

    def opts(self, section: Section, key: Key, default_value: Optional[Value] = None, mandatory=True) -> Optional[str]:
        """
        Looks up a property.

        :param section: The section, e.g. ``provider``.
        :param key: The key within the section, e.g. ``provider.urls``.
        :param default_value: Returned if no scope has a value. Only allowed for optional properties.
        :param mandatory: Whether a missing value is an error. Default: True
        :return: The value as string, or ``default_value`` (converted to a string) if there is none.
        """
        if mandatory and default_value is not None:
            raise exceptions.ConfigError("Can't specify a default value when the option is mandatory")
        for scope in sorted(Scope, key=lambda s: s.value, reverse=True):
            value = self._opts.get(_ConfigKey(scope, section, key))
            if value is not None:
                return value
        if mandatory:
            raise exceptions.ConfigError(f"No value for mandatory configuration: section='{section}', key='{key}'")
        return to_config_string(default_value) if default_value is not None else None

    def _typed(self, section: Section, key: Key, default: Optional[Value], convert_value, type_name: str):
        value = self.opts(section, key, default, mandatory=default is None)
        try:
            return convert_value(value.strip())
        except ValueError:
            raise exceptions.ConfigError(f"Can't parse {type_name} value of '{value}': section='{section}', key='{key}'") from None

    def boolean(self, section: Section, key: Key, default: Optional[bool] = None) -> bool:
        return self._typed(section, key, default, convert.to_bool, "boolean")

    def integer(self, section: Section, key: Key, default: Optional[int] = None) -> int:
        return self._typed(section, key, default, int, "integer")

    def real(self, section: Section, key: Key, default: Optional[float] = None) -> float:
        return self._typed(section, key, default, float, "float")

    def exists(self, section: Section, key: Key) -> bool:
        return self.opts(section, key, mandatory=False) is not None

    def config_present(self):
        return self.config_file.present

    def load_config(self):
        """
        Reads all properties of the config file into ``Scope.application``. It is not an error if there is no config file.
        """
        if not self.config_present():
            logging.getLogger(__name__).debug("No config file at [%s]. Using defaults.", self.config_file.location)
            return
        config = self.config_file.load()
        for section in config.sections():
            for key, value in config.items(section):
                self.add(Scope.application, section, key, value)


class ProviderConfig(Config):
    """
    Connection settings of the provider. Every setting falls back to its environment variable and then to a built-in default.
    """

    @property
    def urls(self) -> tuple[str, ...]:
        return convert.to_strings(self.opts("provider", "provider.urls", os.environ.get("ELASTICSEARCH_URLS"), False))

    @urls.setter
    def urls(self, value) -> None:
        self.add(Scope.applicationOverride, "provider", "provider.urls", ",".join(convert.to_strings(value)))

    @property
    def username(self) -> str | None:
        return self.opts("provider", "provider.username", os.environ.get("ELASTICSEARCH_USERNAME"), False)

    @username.setter
    def username(self, value: str) -> None:
        self.add(Scope.applicationOverride, "provider", "provider.username", value)

    @property
    def password(self) -> str | None:
        return self.opts("provider", "provider.password", os.environ.get("ELASTICSEARCH_PASSWORD"), False)

    @password.setter
    def password(self, value: str) -> None:
        self.add(Scope.applicationOverride, "provider", "provider.password", value)

    @property
    def insecure(self) -> bool:
        return self.boolean("provider", "provider.insecure", convert.to_bool(os.environ.get("ELASTICSEARCH_INSECURE", "false")))

    @insecure.setter
    def insecure(self, value: bool) -> None:
        self.add(Scope.applicationOverride, "provider", "provider.insecure", value)

    @property
    def ca_certs(self) -> str | None:
        return self.opts("provider", "provider.cacert_file", os.environ.get("ELASTICSEARCH_CACERT"), False)

    @ca_certs.setter
    def ca_certs(self, value: str) -> None:
        self.add(Scope.applicationOverride, "provider", "provider.cacert_file", value)

    DEFAULT_RETRY = 6

    @property
    def retry(self) -> int:
        return self.integer("provider", "provider.retry", self.DEFAULT_RETRY)

    @retry.setter
    def retry(self, value: int) -> None:
        self.add(Scope.applicationOverride, "provider", "provider.retry", value)

    DEFAULT_WAIT_BEFORE_RETRY = 10.0

    @property
    def wait_before_retry(self) -> float:
        return self.real("provider", "provider.wait_before_retry", self.DEFAULT_WAIT_BEFORE_RETRY)

    @wait_before_retry.setter
    def wait_before_retry(self, value: float) -> None:
        self.add(Scope.applicationOverride, "provider", "provider.wait_before_retry", value)

    DEFAULT_REQUEST_TIMEOUT = 30.0

    @property
    def request_timeout(self) -> float:
        return self.real("provider", "provider.request_timeout", self.DEFAULT_REQUEST_TIMEOUT)

    @request_timeout.setter
    def request_timeout(self, value: float) -> None:
        self.add(Scope.applicationOverride, "provider", "provider.request_timeout", value)

    def client_options(self) -> dict:
        """
        :return: client options as understood by ``EsClientFactory``.
        """
        opts = {"timeout": self.request_timeout}
        if self.username:
            opts["basic_auth_user"] = self.username
            opts["basic_auth_password"] = self.password or ""
        if self.insecure:
            opts["verify_certs"] = False
        if self.ca_certs:
            opts["ca_certs"] = self.ca_certs
        return opts
