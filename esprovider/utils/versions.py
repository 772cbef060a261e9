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

import re

from esprovider import exceptions

VERSIONS = re.compile(r"^(\d+)\.(\d+)\.(\d+)(?:-(.+))?$")

VERSIONS_OPTIONAL = re.compile(r"^(\d+)(?:\.(\d+))?(?:\.(\d+))?(?:-(.+))?$")


def _versions_pattern(strict):
    return VERSIONS if strict else VERSIONS_OPTIONAL


def is_version_identifier(text, strict=True):
    return text is not None and _versions_pattern(strict).match(text) is not None


def components(version, strict=True):
    """
    Splits a version string into its components.

    :param version: A version string in the format major.minor.patch-suffix (suffix is optional)
    :param strict: Whether "major", "minor" and "patch" are all required. Default: True
    :return: A tuple of "major", "minor", "patch" and "suffix". Any part except "major" may be ``None``.
    """
    pattern = _versions_pattern(strict)
    matches = pattern.match(version) if version is not None else None
    if not matches:
        raise exceptions.InvalidSyntax(f"version string '{version}' does not conform to pattern '{pattern.pattern}'")
    major, minor, patch, suffix = matches.groups()
    return int(major), _optional_int(minor), _optional_int(patch), suffix


def major_version(version):
    """
    :param version: A version string in the format major.minor.patch-suffix (suffix is optional)
    :return: The major version as ``int``. Raises ``InvalidSyntax`` for invalid version strings.
    """
    return components(version)[0]


def _optional_int(value):
    return int(value) if value is not None else None
