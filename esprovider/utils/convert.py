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

from collections.abc import Iterable


def to_bool(value: str | bool) -> bool:
    if value in ["True", "true", "Yes", "yes", "t", "y", "1", True]:
        return True
    elif value in ["False", "false", "No", "no", "f", "n", "0", False]:
        return False
    raise ValueError(f"Cannot convert [{value}] to bool.")


def to_strings(value: str | Iterable[str] | None, sep: str = ",") -> tuple[str, ...]:
    """Splits a separated string (or flattens an iterable of separated strings) into stripped, non-empty items."""
    if value is None:
        return tuple()
    if isinstance(value, str):
        value = [value]
    return tuple(item.strip() for v in value for item in v.split(sep) if item.strip())
