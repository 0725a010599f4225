"""Test environment selection from host patterns."""

import pytest

from envconf.core.errors import ConfigurationError
from envconf.host import HostDescriptor
from envconf.matcher import compose_host, match_environment, pattern_matches

BASE_PATH_ENVIRONMENTS = {
    "local": ["localhost"],
    "qa": ["www.qa.com"],
    "qaMaster": ["www.qa.com/master"],
    "qaFeature1": ["www.qa.com/feature1"],
    "qaFeature1SubFeature1": ["www.qa.com/feature1/subfeature1"],
    "qaFeature1SubFeature2": ["www.qa.com/feature1/subfeature2"],
}


class TestComposeHost:
    def test_host_only(self):
        assert compose_host(HostDescriptor("localhost")) == "localhost"

    def test_with_port(self):
        assert compose_host(HostDescriptor("localhost", "9876")) == "localhost:9876"

    def test_path_ignored_without_base_path_mode(self):
        assert compose_host(HostDescriptor("www.qa.com", "", "/master")) == "www.qa.com"

    def test_path_appended_in_base_path_mode(self):
        host = HostDescriptor("www.qa.com", "8080", "/master")

        assert compose_host(host, base_path_mode=True) == "www.qa.com:8080/master"

    def test_base_path_mode_without_path(self):
        assert compose_host(HostDescriptor("www.qa.com"), base_path_mode=True) == "www.qa.com"


class TestPatternMatches:
    def test_exact(self):
        assert pattern_matches("localhost", "localhost")

    def test_trailing_port_does_not_match(self):
        assert not pattern_matches("localhost", "localhost:9876")

    def test_trailing_path_does_not_match(self):
        assert not pattern_matches("www.qa.com", "www.qa.com/master")

    def test_leading_subdomain_does_not_match(self):
        assert not pattern_matches("qa.com", "www.qa.com")

    def test_pattern_is_a_regex_fragment(self):
        assert pattern_matches(r"dev\d+\.local", "dev42.local")
        assert pattern_matches("www.qa.com", "wwwXqaXcom")

    def test_literal_w_counts_as_boundary(self):
        assert pattern_matches("qa.com", "wwWqa.com")


class TestMatchEnvironment:
    def test_same_host_different_port(self):
        # Arrange
        environments = {"dev1": ["localhost"], "dev2": ["localhost:9876"]}
        host = HostDescriptor("localhost", "9876")

        # Act
        result = match_environment(host, False, environments)

        # Assert
        assert result == "dev2"

    def test_different_hosts_same_port(self):
        environments = {
            "local": ["localhost:9000"],
            "qa": ["www.qa.com:9000"],
            "prod": ["www.prod.com:9000"],
        }

        assert match_environment(HostDescriptor("localhost", "9000"), False, environments) == "local"
        assert match_environment(HostDescriptor("www.qa.com", "9000"), False, environments) == "qa"
        assert match_environment(HostDescriptor("www.prod.com", "9000"), False, environments) == "prod"

    def test_second_pattern_of_environment(self):
        environments = {
            "development": ["localhost", "dev.local"],
            "staging": ["staging.website.com", "test.staging.website.com"],
        }

        result = match_environment(HostDescriptor("test.staging.website.com"), False, environments)

        assert result == "staging"

    def test_first_listed_environment_wins(self):
        # Arrange
        environments = {"generic": ["www\\..*"], "specific": ["www.qa.com"]}
        host = HostDescriptor("www.qa.com")

        # Act & Assert
        assert match_environment(host, False, environments) == "generic"
        assert match_environment(host, False, dict(reversed(list(environments.items())))) == "specific"

    def test_no_match(self):
        environments = {"production": ["website.com"]}

        assert match_environment(HostDescriptor("localhost"), False, environments) is None

    def test_none_environments(self):
        assert match_environment(HostDescriptor("localhost"), False, None) is None

    def test_empty_pattern_lists_are_skipped(self):
        environments = {"empty": [], "missing": None, "local": ["localhost"]}

        assert match_environment(HostDescriptor("localhost"), False, environments) == "local"

    def test_base_path_disabled_uses_host_only(self):
        host = HostDescriptor("www.qa.com", "", "/master")

        assert match_environment(host, False, BASE_PATH_ENVIRONMENTS) == "qa"

    def test_base_path_levels(self):
        expected = {
            "/master": "qaMaster",
            "/feature1": "qaFeature1",
            "/feature1/subfeature1": "qaFeature1SubFeature1",
            "/feature1/subfeature2": "qaFeature1SubFeature2",
        }
        for path, environment in expected.items():
            host = HostDescriptor("www.qa.com", "", path)
            assert match_environment(host, True, BASE_PATH_ENVIRONMENTS) == environment

    def test_base_path_order_decides_between_matching_patterns(self):
        # Arrange
        host = HostDescriptor("www.qa.com", "", "/feature1/subfeature1")
        general_first = {"qaFeature1": ["www.qa.com/feature1.*"], "qaSub": ["www.qa.com/feature1/subfeature1"]}
        specific_first = {"qaSub": ["www.qa.com/feature1/subfeature1"], "qaFeature1": ["www.qa.com/feature1.*"]}

        # Act & Assert
        assert match_environment(host, True, general_first) == "qaFeature1"
        assert match_environment(host, True, specific_first) == "qaSub"

    def test_deterministic(self):
        host = HostDescriptor("localhost", "9876")
        environments = {"dev1": ["localhost"], "dev2": ["localhost:9876"], "dev3": ["localhost.*"]}

        results = {match_environment(host, False, environments) for _ in range(10)}

        assert results == {"dev2"}

    def test_invalid_pattern_names_pattern(self):
        # Arrange
        environments = {"local": ["localhost"], "broken": ["local["]}

        # Act & Assert
        with pytest.raises(ConfigurationError) as exc_info:
            match_environment(HostDescriptor("other.host"), False, environments)

        assert exc_info.value.code == "invalid_host_pattern"
        assert "local[" in str(exc_info.value)
        assert match_environment(HostDescriptor("localhost"), False, environments) == "local"
