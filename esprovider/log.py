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
import json
import logging
import logging.config
import logging.handlers
import os
import time
from typing import Any

import ecs_logging

from esprovider import paths
from esprovider.utils import io

LOG = logging.getLogger(__name__)

TEMPLATE_PATH = io.normalize_path(os.path.join(os.path.dirname(__file__), "resources", "logging.json"))


# pylint: disable=unused-argument
def configure_utc_formatter(*args: Any, **kwargs: Any) -> logging.Formatter:
    """
    Formatter that renders timestamps in UTC unless ``timezone`` is set to ``localtime``.
    """
    formatter = logging.Formatter(fmt=kwargs["format"], datefmt=kwargs["datefmt"])
    formatter.converter = time.localtime if kwargs.get("timezone") == "localtime" else time.gmtime
    return formatter


def configure_ecs_formatter(*args: Any, **kwargs: Any) -> ecs_logging.StdlibFormatter:
    # the ECS formatter defines its own layout
    kwargs.pop("format", None)
    kwargs.pop("datefmt", None)
    return ecs_logging.StdlibFormatter(*args, **kwargs)


# pylint: disable=unused-argument
def configure_file_handler(*, filename: str, encoding: str = "UTF-8", delay: bool = False, **kwargs: Any) -> logging.Handler:
    """
    File handler that expands ``~`` and ``${LOG_PATH}`` in ``filename``. It reopens the file if it has been rotated externally.
    """
    filename = io.normalize_path(filename.replace("${LOG_PATH}", paths.logs()))
    return logging.handlers.WatchedFileHandler(filename=filename, encoding=encoding, delay=delay)


def log_config_path():
    return os.path.join(paths.provider_confdir(), "logging.json")


def add_missing_loggers_to_config(*, config_path: str | None = None, template_path: str = TEMPLATE_PATH):
    """
    Adds loggers that are defined in the template but missing in the user's log configuration. Loggers that the user has
    configured are kept as they are.
    """
    config_path = config_path or log_config_path()
    with open(template_path, encoding="UTF-8") as fd:
        template = json.load(fd)
    with open(config_path, encoding="UTF-8") as fd:
        current = json.load(fd)

    updated = copy.deepcopy(current)
    updated.setdefault("disable_existing_loggers", template.get("disable_existing_loggers", False))
    loggers = updated.setdefault("loggers", {})
    for name, logger in template.get("loggers", {}).items():
        loggers.setdefault(name, logger)

    if updated != current:
        LOG.info("Adding missing loggers from [%s] to [%s].", template_path, config_path)
        with open(config_path, "w", encoding="UTF-8") as fd:
            json.dump(updated, fd, indent=2)


def install_default_log_config():
    """
    Installs the log configuration template to ``~/.esprovider/logging.json`` unless the user already has one, and creates the
    log directory.
    """
    log_config = log_config_path()
    if not os.path.exists(log_config):
        io.ensure_dir(os.path.dirname(log_config))
        with open(TEMPLATE_PATH, encoding="UTF-8") as src, open(log_config, "w", encoding="UTF-8") as target:
            target.write(src.read())
    add_missing_loggers_to_config(config_path=log_config)
    io.ensure_dir(paths.logs())


def load_configuration() -> dict[str, Any]:
    with open(log_config_path(), encoding="UTF-8") as f:
        return json.load(f)


def configure_logging() -> None:
    """
    Configures logging for the current process from the installed log configuration.
    """
    logging.config.dictConfig(load_configuration())
    # urllib3 reports unverified TLS connections (``insecure``) as warnings
    logging.captureWarnings(True)
