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

from typing import Callable, TypeVar

import pytest

C = TypeVar("C")


def cases(arg_name: str = "case", **table: C) -> Callable:
    """Wraps `pytest.mark.parametrize` so that a test runs once per entry of a named input table.

    Example:

        @dataclass
        class MajorVersionCase:
            version: str
            want: int


        @cases(
            es6=MajorVersionCase(version="6.8.23", want=6),
            es7=MajorVersionCase(version="7.17.9", want=7),
        )
        def test_major_version(case: MajorVersionCase):
            assert versions.major_version(case.version) == case.want

    :param arg_name: the name of the test parameter that receives a table entry (by default 'case').
    :param table: the table entries by test id. By convention, expected outcomes are prefixed with `want_`.
    :return: a test method decorator.
    """
    if not table:
        raise ValueError("At least one case is required.")
    return pytest.mark.parametrize(argnames=arg_name, argvalues=list(table.values()), ids=list(table.keys()))
