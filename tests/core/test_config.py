# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for configuration loading, env overrides and property binding."""

import os
from dataclasses import dataclass
from pathlib import Path

import pytest
from pydantic import BaseModel

from simplemapper.config.properties import MapperProperties, PaginationProperties
from simplemapper.core.config import Config, config_properties


class TestConfig:
    def test_get_simple_value(self):
        config = Config({"simplemapper": {"mapper": {"default_bucket": "travel-sample"}}})
        assert config.get("simplemapper.mapper.default_bucket") == "travel-sample"

    def test_get_with_default(self):
        config = Config({})
        assert config.get("missing.key", "default") == "default"

    def test_get_nested_value(self):
        config = Config({"simplemapper": {"pagination": {"max_page_size": 500}}})
        assert config.get("simplemapper.pagination.max_page_size") == 500

    def test_get_section(self):
        config = Config({"simplemapper": {"pagination": {"default_page_size": 10}}})
        assert config.get_section("simplemapper.pagination") == {"default_page_size": 10}
        assert config.get_section("simplemapper.nothing") == {}

    def test_load_from_yaml_file(self, tmp_path: Path):
        config_file = tmp_path / "simplemapper.yaml"
        config_file.write_text("simplemapper:\n  mapper:\n    default_scope: inventory\n")
        config = Config.from_file(config_file)
        assert config.get("simplemapper.mapper.default_scope") == "inventory"
        assert str(config_file) in config.loaded_sources

    def test_load_from_toml_file(self, tmp_path: Path):
        config_file = tmp_path / "simplemapper.toml"
        config_file.write_text("[simplemapper.pagination]\nmax_page_size = 200\n")
        config = Config.from_file(config_file)
        assert config.get("simplemapper.pagination.max_page_size") == 200

    def test_file_values_merge_over_library_defaults(self, tmp_path: Path):
        config_file = tmp_path / "simplemapper.yaml"
        config_file.write_text("simplemapper:\n  pagination:\n    default_page_size: 50\n")
        config = Config.from_file(config_file)
        assert config.get("simplemapper.pagination.default_page_size") == 50
        assert config.get("simplemapper.pagination.max_page_size") == 1000

    def test_missing_file_uses_defaults_only(self, tmp_path: Path):
        config = Config.from_file(tmp_path / "absent.yaml")
        assert config.get("simplemapper.pagination.default_page_size") == 25

    def test_defaults(self):
        config = Config.defaults()
        assert config.get("simplemapper.pagination.default_page_size") == 25
        assert config.get("simplemapper.mapper.include_query_in_exceptions") is True
        assert config.get("simplemapper.logging.format") == "console"

    def test_env_var_override(self):
        os.environ["SIMPLEMAPPER_MAPPER_DEFAULT_BUCKET"] = "env-bucket"
        try:
            config = Config({"simplemapper": {"mapper": {"default_bucket": "file-bucket"}}})
            assert config.get("simplemapper.mapper.default_bucket") == "env-bucket"
        finally:
            del os.environ["SIMPLEMAPPER_MAPPER_DEFAULT_BUCKET"]


class TestPlaceholders:
    def test_resolves_config_reference(self):
        config = Config({"base": {"bucket": "travel"}, "simplemapper": {"mapper": {"default_bucket": "${base.bucket}"}}})
        assert config.get("simplemapper.mapper.default_bucket") == "travel"

    def test_resolves_env_var(self, monkeypatch):
        monkeypatch.setenv("CB_SCOPE", "tenant_a")
        config = Config({"simplemapper": {"mapper": {"default_scope": "${CB_SCOPE}"}}})
        assert config.get("simplemapper.mapper.default_scope") == "tenant_a"

    def test_uses_default_value(self):
        config = Config({"simplemapper": {"mapper": {"default_scope": "${NO_SUCH_SCOPE_VAR:_default}"}}})
        assert config.get("simplemapper.mapper.default_scope") == "_default"

    def test_unresolvable_raises(self):
        config = Config({"simplemapper": {"mapper": {"default_scope": "${NO_SUCH_SCOPE_VAR}"}}})
        with pytest.raises(ValueError, match="Cannot resolve placeholder"):
            config.get("simplemapper.mapper.default_scope")

    def test_circular_reference_raises(self):
        config = Config({"a": "${b}", "b": "${a}"})
        with pytest.raises(ValueError, match="recursion depth"):
            config.get("a")


class TestConfigProperties:
    def test_bind_to_dataclass(self):
        config = Config({"simplemapper": {"pagination": {"default_page_size": 10, "max_page_size": 100}}})
        props = config.bind(PaginationProperties)
        assert props.default_page_size == 10
        assert props.max_page_size == 100

    def test_bind_uses_defaults(self):
        props = Config({}).bind(MapperProperties)
        assert props.default_bucket is None
        assert props.include_query_in_exceptions is True

    def test_env_override_is_coerced(self, monkeypatch):
        monkeypatch.setenv("SIMPLEMAPPER_PAGINATION_MAX_PAGE_SIZE", "50")
        monkeypatch.setenv("SIMPLEMAPPER_MAPPER_INCLUDE_QUERY_IN_EXCEPTIONS", "false")
        config = Config.defaults()
        assert config.bind(PaginationProperties).max_page_size == 50
        assert config.bind(MapperProperties).include_query_in_exceptions is False

    def test_bind_to_pydantic_model(self):
        @config_properties(prefix="simplemapper.mapper")
        class MapperSettings(BaseModel):
            default_bucket: str = "default"
            include_query_in_exceptions: bool = True

        config = Config({"simplemapper": {"mapper": {"default_bucket": "travel-sample"}}})
        settings = config.bind(MapperSettings)
        assert settings.default_bucket == "travel-sample"
        assert settings.include_query_in_exceptions is True

    def test_pydantic_validation_error_is_value_error(self):
        @config_properties(prefix="simplemapper.pagination")
        class PageSettings(BaseModel):
            max_page_size: int

        config = Config({"simplemapper": {"pagination": {"max_page_size": "lots"}}})
        with pytest.raises(ValueError, match="Configuration validation failed"):
            config.bind(PageSettings)

    def test_bind_undecorated_class_raises(self):
        @dataclass
        class Plain:
            value: int = 1

        with pytest.raises(ValueError, match="not decorated"):
            Config({}).bind(Plain)


class TestProfileConfigMerging:
    def test_merge_profile_config(self, tmp_path):
        base = tmp_path / "simplemapper.yaml"
        base.write_text("simplemapper:\n  mapper:\n    default_bucket: app\n    default_scope: main\n")

        profile = tmp_path / "simplemapper-dev.yaml"
        profile.write_text("simplemapper:\n  mapper:\n    default_scope: dev\n")

        config = Config.from_file(base, active_profiles=["dev"])
        assert config.get("simplemapper.mapper.default_bucket") == "app"
        assert config.get("simplemapper.mapper.default_scope") == "dev"

    def test_later_profile_wins(self, tmp_path):
        base = tmp_path / "simplemapper.yaml"
        base.write_text("db:\n  url: base\n")
        (tmp_path / "simplemapper-dev.yaml").write_text("db:\n  url: dev-url\n")
        (tmp_path / "simplemapper-local.yaml").write_text("db:\n  url: local-url\n")

        config = Config.from_file(base, active_profiles=["dev", "local"])
        assert config.get("db.url") == "local-url"

    def test_missing_profile_file_is_skipped(self, tmp_path):
        base = tmp_path / "simplemapper.yaml"
        base.write_text("app:\n  name: test\n")

        config = Config.from_file(base, active_profiles=["nonexistent"])
        assert config.get("app.name") == "test"

    def test_env_vars_still_win(self, tmp_path, monkeypatch):
        base = tmp_path / "simplemapper.yaml"
        base.write_text("app:\n  name: base\n")
        (tmp_path / "simplemapper-dev.yaml").write_text("app:\n  name: dev\n")

        monkeypatch.setenv("SIMPLEMAPPER_APP_NAME", "env-wins")
        config = Config.from_file(base, active_profiles=["dev"])
        assert config.get("app.name") == "env-wins"
