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

import nox


@nox.session(python=["3.10", "3.11", "3.12"])
def test(session: nox.Session) -> None:
    session.install(".[develop]")
    session.run("pytest", "tests")


@nox.session(python="3")
def it(session: nox.Session) -> None:
    session.install(".[develop]")
    session.run("pytest", "-s", "it", *session.posargs)
