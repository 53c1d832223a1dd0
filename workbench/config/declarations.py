"""Every configuration key Workbench reads, with its legacy source."""

from __future__ import annotations

from typing import Any, MutableMapping

from .coercion import (
    URL,
    Array,
    Boolean,
    Duration,
    Hash,
    Integer,
    NonemptyString,
    String,
    strip_url_path,
)
from .loader import ConfigLoader, InvalidConfigType, Transform, set_cfg


def _url_text(path: str, value: Any) -> str:
    if value is None or value is False:
        return ""
    if not isinstance(value, str):
        raise InvalidConfigType(path, URL, value)
    return value


def _stripped(path: str, url: str, value: Any) -> str:
    try:
        return strip_url_path(url)
    except ValueError as exc:
        raise InvalidConfigType(path, URL, value, str(exc)) from exc


def _origin_url(cfg: MutableMapping[str, Any], path: str, value: Any) -> None:
    set_cfg(cfg, path, _stripped(path, _url_text(path, value), value))


def _wildcard_url(placeholder: str) -> Transform:
    def _transform(cfg: MutableMapping[str, Any], path: str, value: Any) -> None:
        url = _url_text(path, value).replace(placeholder, "*")
        set_cfg(cfg, path, _stripped(path, url, value))

    return _transform


def _mimetype_set(cfg: MutableMapping[str, Any], path: str, value: Any) -> None:
    if value is None or value is False:
        value = []
    if not isinstance(value, (list, dict)) or not all(isinstance(item, str) for item in value):
        raise InvalidConfigType(path, Hash, value, "expected a list of mimetypes")
    set_cfg(cfg, path, {mimetype: {} for mimetype in value})


def _list_or_empty(cfg: MutableMapping[str, Any], path: str, value: Any) -> None:
    if value is None or value is False:
        value = []
    if not isinstance(value, list):
        raise InvalidConfigType(path, Array, value)
    set_cfg(cfg, path, value)


def _string_or_empty(cfg: MutableMapping[str, Any], path: str, value: Any) -> None:
    set_cfg(cfg, path, "" if not value else str(value))


def build_config_loader() -> ConfigLoader:
    """Return a loader with all Workbench declarations registered."""

    cfg = ConfigLoader()

    cfg.declare_config("ManagementToken", String, "ManagementToken")
    cfg.declare_config("TLS.Insecure", Boolean, "arvados_insecure_https")

    cfg.declare_config("Services.Controller.ExternalURL", URL, "arvados_v1_base", _origin_url)
    cfg.declare_config("Services.WebShell.ExternalURL", URL, "shell_in_a_box_url", _wildcard_url("%{hostname}"))
    cfg.declare_config("Services.WebDAV.ExternalURL", URL, "keep_web_url", _wildcard_url("%{uuid_or_pdh}"))
    cfg.declare_config(
        "Services.WebDAVDownload.ExternalURL",
        URL,
        "keep_web_download_url",
        _wildcard_url("%{uuid_or_pdh}"),
    )
    cfg.declare_config("Services.Composer.ExternalURL", URL, "composer_url")
    cfg.declare_config("Services.Workbench2.ExternalURL", URL, "workbench2_url")

    cfg.declare_config("Users.AnonymousUserToken", String, "anonymous_user_token")

    cfg.declare_config("Workbench.SecretToken", String, "secret_token")
    cfg.declare_config("Workbench.SecretKeyBase", NonemptyString, "secret_key_base")

    cfg.declare_config(
        "Workbench.ApplicationMimetypesWithViewIcon",
        Hash,
        "application_mimetypes_with_view_icon",
        _mimetype_set,
    )
    cfg.declare_config("Workbench.RunningJobLogRecordsToFetch", Integer, "running_job_log_records_to_fetch")
    cfg.declare_config("Workbench.LogViewerMaxBytes", Integer, "log_viewer_max_bytes")
    cfg.declare_config("Workbench.TrustAllContent", Boolean, "trust_all_content")
    cfg.declare_config("Workbench.UserProfileFormFields", Array, "user_profile_form_fields", _list_or_empty)
    cfg.declare_config("Workbench.UserProfileFormMessage", String, "user_profile_form_message")
    cfg.declare_config("Workbench.Theme", String, "arvados_theme")
    cfg.declare_config("Workbench.ShowUserNotifications", Boolean, "show_user_notifications")
    cfg.declare_config("Workbench.ShowUserAgreementInline", Boolean, "show_user_agreement_inline")
    cfg.declare_config("Workbench.RepositoryCache", String, "repository_cache")
    cfg.declare_config("Workbench.Repositories", Boolean, "repositories")
    cfg.declare_config("Workbench.APIClientConnectTimeout", Duration, "api_client_connect_timeout")
    cfg.declare_config("Workbench.APIClientReceiveTimeout", Duration, "api_client_receive_timeout")
    cfg.declare_config("Workbench.APIResponseCompression", Boolean, "api_response_compression")
    cfg.declare_config("Workbench.SiteName", String, "site_name")
    cfg.declare_config("Workbench.MultiSiteSearch", String, "multi_site_search", _string_or_empty)
    cfg.declare_config("Workbench.EnablePublicProjectsPage", Boolean, "enable_public_projects_page")
    cfg.declare_config("Workbench.EnableGettingStartedPopup", Boolean, "enable_getting_started_popup")
    cfg.declare_config("Workbench.ArvadosPublicDataDocURL", String, "arvados_public_data_doc_url")
    cfg.declare_config("Workbench.ArvadosDocsite", String, "arvados_docsite")
    cfg.declare_config(
        "Workbench.ShowRecentCollectionsOnDashboard",
        Boolean,
        "show_recent_collections_on_dashboard",
    )
    cfg.declare_config("Workbench.ActivationContactLink", String, "activation_contact_link")
    cfg.declare_config("Workbench.DefaultOpenIdPrefix", String, "default_openid_prefix")

    cfg.declare_config("Mail.SendUserSetupNotificationEmail", Boolean, "send_user_setup_notification_email")
    cfg.declare_config("Mail.IssueReporterEmailFrom", String, "issue_reporter_email_from")
    cfg.declare_config("Mail.IssueReporterEmailTo", String, "issue_reporter_email_to")
    cfg.declare_config("Mail.SupportEmailAddress", String, "support_email_address")
    cfg.declare_config("Mail.EmailFrom", String, "email_from")

    return cfg


__all__ = ["build_config_loader"]
