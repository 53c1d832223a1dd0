from __future__ import annotations

from datetime import timedelta
from pathlib import Path

import pytest

from workbench.config import InvalidConfigType, MissingRequiredConfig, load_workbench_config
from workbench.config.export import (
    config_dump_payload,
    config_migrate_payload,
    dump_yaml,
    redact_secrets,
)


def test_full_load_layers_defaults_cluster_and_legacy(
    tmp_path: Path, write_legacy, runner_factory, complete_dump
) -> None:
    complete_dump["Workbench"]["SiteName"] = "Cluster site"
    complete_dump["Workbench"]["Theme"] = "cluster-theme"
    write_legacy(
        common={
            "site_name": "Legacy site",
            "anonymous_user_token": "abc",
            "api_client_connect_timeout": "30s",
            "some_unrelated_setting": 7,
        }
    )
    runner = runner_factory(complete_dump)

    loaded = load_workbench_config(tmp_path, "production", runner=runner)

    assert runner.calls == ["config-defaults", "config-dump"]
    assert loaded.cluster_id == "zzzzz"
    assert loaded.config["ClusterID"] == "zzzzz"
    assert loaded.config["Workbench"]["SiteName"] == "Legacy site"
    assert loaded.config["Workbench"]["Theme"] == "cluster-theme"
    assert loaded.config["Users"]["AnonymousUserToken"] == "abc"
    assert loaded.config["Workbench"]["APIClientConnectTimeout"] == timedelta(seconds=30)
    assert loaded.cluster["Workbench"]["SiteName"] == "Cluster site"
    assert loaded.cluster["Workbench"]["APIClientConnectTimeout"] == timedelta(minutes=2)
    assert loaded.defaults["Workbench"]["SiteName"] == "Arvados Workbench"
    assert loaded.remaining == {"some_unrelated_setting": 7}


def test_required_secret_missing_in_final_config_fails(tmp_path: Path, runner_factory) -> None:
    with pytest.raises(MissingRequiredConfig) as excinfo:
        load_workbench_config(tmp_path, "production", runner=runner_factory({}))

    assert excinfo.value.key == "Workbench.SecretKeyBase"


def test_required_secret_from_legacy_file_satisfies_check(tmp_path: Path, write_legacy, runner_factory) -> None:
    write_legacy(production={"secret_key_base": "from-legacy"})

    loaded = load_workbench_config(
        tmp_path,
        "production",
        runner=runner_factory(defaults_available=False, dump_available=False),
    )

    assert loaded.config["Workbench"]["SecretKeyBase"] == "from-legacy"
    assert loaded.defaults["Workbench"]["SecretKeyBase"] == ""
    assert loaded.cluster["Workbench"]["SecretKeyBase"] == ""
    assert loaded.cluster_id == "xxxxx"


def test_bad_legacy_type_names_field(tmp_path: Path, write_legacy, runner_factory, complete_dump) -> None:
    write_legacy(common={"log_viewer_max_bytes": "plenty"})

    with pytest.raises(InvalidConfigType) as excinfo:
        load_workbench_config(tmp_path, "production", runner=runner_factory(complete_dump))

    assert excinfo.value.key == "Workbench.LogViewerMaxBytes"
    assert excinfo.value.value == "plenty"


def test_dump_and_migrate_payloads(tmp_path: Path, write_legacy, runner_factory, complete_dump) -> None:
    write_legacy(common={"keep_web_url": "https://*.collections.example.com/%{uuid_or_pdh}"})
    loaded = load_workbench_config(tmp_path, "production", runner=runner_factory(complete_dump))

    dump = config_dump_payload(loaded)
    assert list(dump["Clusters"]) == ["zzzzz"]
    assert "ClusterID" not in dump["Clusters"]["zzzzz"]

    migrate = config_migrate_payload(loaded)
    assert migrate == {
        "Clusters": {"zzzzz": {"Services": {"WebDAV": {"ExternalURL": "https://*.collections.example.com"}}}}
    }

    text = dump_yaml(dump)
    assert "APIClientConnectTimeout: 2m" in text
    assert "APIClientReceiveTimeout: 5m" in text


def test_redact_secrets_leaves_input_untouched(tmp_path: Path, runner_factory, complete_dump) -> None:
    loaded = load_workbench_config(tmp_path, "production", runner=runner_factory(complete_dump))

    redacted = redact_secrets(loaded.config)

    assert redacted["Workbench"]["SecretKeyBase"] == "xxxxxxxx"
    assert redacted["ManagementToken"] == "xxxxxxxx"
    assert redacted["Users"]["AnonymousUserToken"] == ""
    assert loaded.config["Workbench"]["SecretKeyBase"] == "s3cr3t"


def test_wrongly_typed_transform_input_reports_field(
    tmp_path: Path, write_legacy, runner_factory, complete_dump
) -> None:
    write_legacy(common={"keep_web_url": 123})

    with pytest.raises(InvalidConfigType) as excinfo:
        load_workbench_config(tmp_path, "production", runner=runner_factory(complete_dump))

    assert excinfo.value.key == "Services.WebDAV.ExternalURL"


@pytest.mark.parametrize("value", ["999999999999h", 10**30, float("inf")])
def test_out_of_range_duration_reports_field(
    tmp_path: Path, write_legacy, runner_factory, complete_dump, value
) -> None:
    write_legacy(common={"api_client_connect_timeout": value})

    with pytest.raises(InvalidConfigType) as excinfo:
        load_workbench_config(tmp_path, "production", runner=runner_factory(complete_dump))

    assert excinfo.value.key == "Workbench.APIClientConnectTimeout"
