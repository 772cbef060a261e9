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

from unittest import mock

import pytest

from esprovider import checks, exceptions, testing
from esprovider.client import V7Client
from esprovider.config import ProviderConfig
from esprovider.provider import Provider


class TestLicenseScenario:
    def test_passes_and_restores_basic_license(self, cluster, provider):
        destroyed = testing.run(testing.license_case(provider))

        rs = destroyed.root_module().resources["elasticsearch_license.test"]
        assert rs.primary.id == cluster.license["uid"]
        assert cluster.license["type"] == "basic"
        assert len(cluster.calls("DELETE", cluster.license_path())) == 1
        # once on apply and once to restore the baseline after destroy
        assert len(cluster.calls("POST", cluster.license_path("/start_basic"))) == 2

    def test_license_not_deleted(self, cluster, provider):
        cluster.keep_license_on_delete = True

        with pytest.raises(exceptions.ResourceStillExists):
            testing.run(testing.license_case(provider))

    def test_baseline_restore_fails(self, cluster, provider):
        case = testing.license_case(provider)
        original_destroy = provider.destroy

        def destroy_and_break_start_basic(state):
            original_destroy(state)
            cluster.fail_start_basic = True

        with mock.patch.object(provider, "destroy", side_effect=destroy_and_break_start_basic):
            with pytest.raises(exceptions.BaselineRestoreFailed):
                testing.run(case)


class TestUserScenario:
    def test_passes(self, cluster, provider):
        destroyed = testing.run(testing.user_case(provider))

        assert destroyed.root_module().resources["elasticsearch_user.test"].primary.id == "terraform-test"
        assert cluster.users == {}
        assert len(cluster.calls("DELETE", cluster.user_path("terraform-test"))) == 1

    def test_user_still_exists_after_destroy(self, cluster, provider):
        cluster.keep_users_on_delete = True

        with pytest.raises(exceptions.ResourceStillExists, match="User 'terraform-test' still exists"):
            testing.run(testing.user_case(provider))

    def test_user_fixture(self):
        attributes = testing.USER_CONFIG["resource"]["elasticsearch_user"]["test"]
        assert attributes["username"] == "terraform-test"
        assert attributes["roles"] == ["kibana_user"]


class TestRun:
    def test_failed_step_destroys_resources(self, cluster, provider):
        def failing_check(state):
            raise exceptions.StateLookupError("Not found: elasticsearch_user.other")

        case = testing.AcceptanceCase(provider=provider, steps=[testing.Step(testing.USER_CONFIG, check=failing_check)])

        with pytest.raises(exceptions.StateLookupError, match="elasticsearch_user.other"):
            testing.run(case)
        assert cluster.users == {}

    def test_failed_cleanup_raises_step_error(self, cluster, provider):
        cluster.keep_users_on_delete = True

        def failing_check(state):
            raise exceptions.StateLookupError("Not found: elasticsearch_user.other")

        case = testing.AcceptanceCase(
            provider=provider,
            steps=[testing.Step(testing.USER_CONFIG, check=failing_check)],
            check_destroy=checks.resource_destroyed(provider.meta(), "elasticsearch_user"),
        )

        with pytest.raises(exceptions.StateLookupError):
            testing.run(case)

    def test_runs_steps_in_order(self, cluster, provider):
        second = dict(testing.USER_CONFIG["resource"]["elasticsearch_user"]["test"], roles=["monitoring_user"])
        seen = []

        def remember_roles(state):
            seen.append(state.root_module().resources["elasticsearch_user.test"].primary.attributes["roles"])

        case = testing.AcceptanceCase(
            provider=provider,
            steps=[
                testing.Step(testing.USER_CONFIG, check=remember_roles),
                testing.Step({"resource": {"elasticsearch_user": {"test": second}}}, check=remember_roles),
            ],
        )

        testing.run(case)

        assert seen == [["kibana_user"], ["monitoring_user"]]

    def test_pre_check_runs_first(self, clean_env):
        handle = mock.create_autospec(V7Client, instance=True)
        provider = Provider(ProviderConfig(), handle=handle)

        with pytest.raises(exceptions.SystemSetupError, match="ELASTICSEARCH_URLS must be set for acceptance tests"):
            testing.run(testing.user_case(provider))
        assert handle.mock_calls == []

    @pytest.mark.parametrize("make_case", [testing.license_case, testing.user_case])
    def test_pre_check_runs_before_connecting(self, clean_env, make_case):
        client_factory_class = mock.Mock()
        provider = Provider(ProviderConfig(), client_factory_class=client_factory_class)

        case = make_case(provider)
        client_factory_class.assert_not_called()

        with pytest.raises(exceptions.SystemSetupError, match="ELASTICSEARCH_URLS must be set for acceptance tests"):
            testing.run(case)
        client_factory_class.assert_not_called()

    def test_pre_check_passes_with_urls(self, clean_env, monkeypatch):
        monkeypatch.setenv("ELASTICSEARCH_URLS", "http://localhost:9200")
        testing.pre_check()

    def test_pre_check_reads_config_file(self, clean_env, tmp_path):
        config_dir = tmp_path / ".esprovider"
        config_dir.mkdir()
        (config_dir / "provider.ini").write_text("[provider]\nprovider.urls = http://localhost:9200\n", encoding="utf-8")

        testing.pre_check()
