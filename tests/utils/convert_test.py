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

from __future__ import annotations

from dataclasses import dataclass

import pytest

from esprovider.utils import convert
from esprovider.utils.cases import cases


class TestToBool:
    def test_convert_to_true(self):
        values: list[str | bool] = ["True", "true", "Yes", "yes", "t", "y", "1", True]
        for value in values:
            assert convert.to_bool(value) is True

    def test_convert_to_false(self):
        values: list[str | bool] = ["False", "false", "No", "no", "f", "n", "0", False]
        for value in values:
            assert convert.to_bool(value) is False

    def test_cannot_convert_invalid_value(self):
        values = ["Invalid", None, []]
        for value in values:
            with pytest.raises(ValueError) as exc:
                convert.to_bool(value)  # type: ignore
            assert exc.value.args[0] == f"Cannot convert [{value}] to bool."


@dataclass
class ToStringsCase:
    value: str | list[str] | None
    want: tuple[str, ...]


@cases(
    none=ToStringsCase(value=None, want=()),
    empty=ToStringsCase(value="", want=()),
    single=ToStringsCase(value="http://localhost:9200", want=("http://localhost:9200",)),
    comma_separated=ToStringsCase(value="http://es-01:9200, http://es-02:9200,", want=("http://es-01:9200", "http://es-02:9200")),
    list_of_separated=ToStringsCase(value=["http://es-01:9200,http://es-02:9200", "http://es-03:9200"], want=("http://es-01:9200", "http://es-02:9200", "http://es-03:9200")),
)
def test_to_strings(case: ToStringsCase):
    assert convert.to_strings(case.value) == case.want
