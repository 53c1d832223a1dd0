from __future__ import annotations

from datetime import timedelta

import pytest

from workbench.config.cluster import bundled_defaults
from workbench.config.declarations import build_config_loader
from workbench.config.loader import InvalidConfigType


@pytest.fixture
def target():
    _, config = bundled_defaults()
    return config


def test_every_declared_path_exists_in_bundled_defaults(target) -> None:
    loader = build_config_loader()
    target["Workbench"]["SecretKeyBase"] = "key"

    loader.coercion_and_check(target)

    assert target["Workbench"]["APIClientConnectTimeout"] == timedelta(minutes=2)
    assert target["Workbench"]["LogViewerMaxBytes"] == 1_000_000


def test_anonymous_user_token_is_copied_verbatim(target) -> None:
    build_config_loader().migrate_config({"anonymous_user_token": "abc"}, target)

    assert target["Users"]["AnonymousUserToken"] == "abc"


def test_keep_web_url_placeholder_becomes_wildcard_and_path_is_dropped(target) -> None:
    legacy = {"keep_web_url": "https://*.example.com/%{uuid_or_pdh}"}

    build_config_loader().migrate_config(legacy, target)

    assert target["Services"]["WebDAV"]["ExternalURL"] == "https://*.example.com"


def test_keep_web_download_url_placeholder_in_host(target) -> None:
    legacy = {"keep_web_download_url": "https://%{uuid_or_pdh}.dl.example.com/c=%{uuid_or_pdh}/"}

    build_config_loader().migrate_config(legacy, target)

    assert target["Services"]["WebDAVDownload"]["ExternalURL"] == "https://*.dl.example.com"


def test_shell_in_a_box_hostname_placeholder(target) -> None:
    legacy = {"shell_in_a_box_url": "https://webshell.example.com/%{hostname}"}

    build_config_loader().migrate_config(legacy, target)

    assert target["Services"]["WebShell"]["ExternalURL"] == "https://webshell.example.com"


def test_api_base_keeps_only_origin(target) -> None:
    build_config_loader().migrate_config({"arvados_v1_base": "https://api.example.com/arvados/v1"}, target)

    assert target["Services"]["Controller"]["ExternalURL"] == "https://api.example.com"


def test_list_and_string_transforms(target) -> None:
    legacy = {
        "application_mimetypes_with_view_icon": ["pdf", "text"],
        "user_profile_form_fields": None,
        "multi_site_search": True,
    }

    build_config_loader().migrate_config(legacy, target)

    assert target["Workbench"]["ApplicationMimetypesWithViewIcon"] == {"pdf": {}, "text": {}}
    assert target["Workbench"]["UserProfileFormFields"] == []
    assert target["Workbench"]["MultiSiteSearch"] == "True"

    build_config_loader().migrate_config({"multi_site_search": None}, target)
    assert target["Workbench"]["MultiSiteSearch"] == ""


def test_unset_url_transform_value_clears_url(target) -> None:
    target["Services"]["WebDAV"]["ExternalURL"] = "https://old.example.com"

    build_config_loader().migrate_config({"keep_web_url": None}, target)

    assert target["Services"]["WebDAV"]["ExternalURL"] == ""


def test_false_legacy_strings_become_empty(target) -> None:
    loader = build_config_loader()
    target["Workbench"]["SecretKeyBase"] = "key"
    legacy = {"anonymous_user_token": False, "composer_url": False, "keep_web_url": False}

    loader.migrate_config(legacy, target)
    loader.coercion_and_check(target)

    assert target["Users"]["AnonymousUserToken"] == ""
    assert target["Services"]["Composer"]["ExternalURL"] == ""
    assert target["Services"]["WebDAV"]["ExternalURL"] == ""


def test_false_secret_key_base_passes_only_without_check(target) -> None:
    loader = build_config_loader()
    loader.migrate_config({"secret_key_base": False}, target)

    loader.coercion_and_check(target, check_nonempty=False)

    assert target["Workbench"]["SecretKeyBase"] == ""


@pytest.mark.parametrize(
    "legacy_key, value, path",
    [
        ("keep_web_url", 123, "Services.WebDAV.ExternalURL"),
        ("arvados_v1_base", 5, "Services.Controller.ExternalURL"),
        ("shell_in_a_box_url", ["https://a"], "Services.WebShell.ExternalURL"),
        ("arvados_v1_base", "https://[::1/arvados", "Services.Controller.ExternalURL"),
        ("application_mimetypes_with_view_icon", 5, "Workbench.ApplicationMimetypesWithViewIcon"),
        ("application_mimetypes_with_view_icon", "pdf", "Workbench.ApplicationMimetypesWithViewIcon"),
        ("application_mimetypes_with_view_icon", [1, 2], "Workbench.ApplicationMimetypesWithViewIcon"),
        ("user_profile_form_fields", "name", "Workbench.UserProfileFormFields"),
    ],
)
def test_transforms_reject_wrongly_typed_legacy_values(target, legacy_key, value, path) -> None:
    with pytest.raises(InvalidConfigType) as excinfo:
        build_config_loader().migrate_config({legacy_key: value}, target)

    assert excinfo.value.key == path
    assert excinfo.value.value == value
