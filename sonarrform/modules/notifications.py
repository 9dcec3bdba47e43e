# encoding: utf-8
"""Notifications (``/notification``)."""

from typing import List, Optional, Set

from pydantic import Field

from sonarrform.gpi.fields import FieldRegistry
from sonarrform.gpi.item import ProviderItem, build_generic, build_record
from sonarrform.gpi.resource import family_types

ENDPOINT = "notification"

REGISTRY = FieldRegistry(
    strings=[
        "accessToken",
        "accessTokenSecret",
        "apiKey",
        "appToken",
        "arguments",
        "author",
        "authToken",
        "authUser",
        "avatar",
        "botToken",
        "channel",
        "chatId",
        "clickUrl",
        "consumerKey",
        "consumerSecret",
        "deviceNames",
        "displayTime",
        "expire",
        "expires",
        "from",
        "host",
        "icon",
        "mention",
        "password",
        "path",
        "refreshToken",
        "retry",
        "senderDomain",
        "senderId",
        "server",
        "serverUrl",
        "signIn",
        "sound",
        "token",
        "url",
        "userKey",
        "username",
        "webHookUrl",
    ],
    ints=["method", "port", "priority"],
    bools=[
        "alwaysUpdate",
        "cleanLibrary",
        "directMessage",
        "notify",
        "requireEncryption",
        "sendSilently",
        "updateLibrary",
        "useEuEndpoint",
        "useSSL",
    ],
    int_lists=["grabFields", "importFields"],
    string_lists=["to", "cc", "bcc", "channelTags", "deviceIds", "devices", "recipients", "topics", "tags"],
    slots={"from": "from_address"},
)

SENSITIVE = frozenset(
    {
        "access_token",
        "access_token_secret",
        "api_key",
        "app_token",
        "auth_token",
        "bot_token",
        "consumer_secret",
        "password",
        "refresh_token",
        "token",
        "user_key",
        "web_hook_url",
    }
)

TRIGGERS = {
    "onGrab": "on_grab",
    "onDownload": "on_download",
    "onUpgrade": "on_upgrade",
    "onImportComplete": "on_import_complete",
    "onRename": "on_rename",
    "onSeriesAdd": "on_series_add",
    "onSeriesDelete": "on_series_delete",
    "onEpisodeFileDelete": "on_episode_file_delete",
    "onEpisodeFileDeleteForUpgrade": "on_episode_file_delete_for_upgrade",
    "onHealthIssue": "on_health_issue",
    "onHealthRestored": "on_health_restored",
    "onApplicationUpdate": "on_application_update",
    "onManualInteractionRequired": "on_manual_interaction_required",
    "includeHealthWarnings": "include_health_warnings",
}

NotificationItem = build_generic(
    "NotificationItem",
    REGISTRY,
    header={key: (slot, Optional[bool]) for key, slot in TRIGGERS.items()},
)


class NotificationBase(ProviderItem):
    generic = NotificationItem

    id: Optional[int] = Field(default=None, description="Notification ID.")
    name: str = Field(..., description="Notification name.")
    tags: Optional[Set[int]] = Field(default=None, description="List of associated tags.")

    on_grab: Optional[bool] = None
    on_download: Optional[bool] = None
    on_upgrade: Optional[bool] = None
    on_import_complete: Optional[bool] = None
    on_rename: Optional[bool] = None
    on_series_add: Optional[bool] = None
    on_series_delete: Optional[bool] = None
    on_episode_file_delete: Optional[bool] = None
    on_episode_file_delete_for_upgrade: Optional[bool] = None
    on_health_issue: Optional[bool] = None
    on_health_restored: Optional[bool] = None
    on_application_update: Optional[bool] = None
    on_manual_interaction_required: Optional[bool] = None
    include_health_warnings: Optional[bool] = None


Notification = build_record(
    "Notification",
    NotificationBase,
    REGISTRY,
    "notification",
    sensitive=SENSITIVE,
    implementation=(str, Field(..., description="Notification implementation name.")),
    config_contract=(str, Field(..., description="Notification configuration template.")),
)


class NotificationWebhook(NotificationBase):
    """Generic webhook."""

    type_suffix = "notification_webhook"
    implementation_name = "Webhook"
    config_contract_name = "WebhookSettings"
    sensitive = frozenset({"password"})

    url: Optional[str] = None
    method: Optional[int] = Field(default=None, description="Method. `1` POST, `2` PUT.")
    username: Optional[str] = None
    password: Optional[str] = None


class NotificationDiscord(NotificationBase):
    """Discord channel webhook."""

    type_suffix = "notification_discord"
    implementation_name = "Discord"
    config_contract_name = "DiscordSettings"
    sensitive = frozenset({"web_hook_url"})

    web_hook_url: Optional[str] = None
    username: Optional[str] = None
    avatar: Optional[str] = None
    author: Optional[str] = None
    grab_fields: Optional[List[int]] = Field(
        default=None,
        description="Grab fields. `0` Overview, `1` Rating, `2` Genres, `3` Quality, `4` Group, `5` Size, `6` Links, `7` Release, `8` Poster, `9` Fanart.",
    )
    import_fields: Optional[List[int]] = None


class NotificationEmail(NotificationBase):
    """SMTP email."""

    type_suffix = "notification_email"
    implementation_name = "Email"
    config_contract_name = "EmailSettings"
    sensitive = frozenset({"password"})

    server: Optional[str] = None
    port: Optional[int] = None
    require_encryption: Optional[bool] = None
    username: Optional[str] = None
    password: Optional[str] = None
    from_address: Optional[str] = Field(default=None, description="Sender address.")
    to: Optional[List[str]] = None
    cc: Optional[List[str]] = None
    bcc: Optional[List[str]] = None


class NotificationSlack(NotificationBase):
    """Slack incoming webhook."""

    type_suffix = "notification_slack"
    implementation_name = "Slack"
    config_contract_name = "SlackSettings"
    sensitive = frozenset({"web_hook_url"})

    web_hook_url: Optional[str] = None
    username: Optional[str] = None
    icon: Optional[str] = None
    channel: Optional[str] = None


class NotificationGotify(NotificationBase):
    """Gotify server."""

    type_suffix = "notification_gotify"
    implementation_name = "Gotify"
    config_contract_name = "GotifySettings"
    sensitive = frozenset({"app_token"})

    server: Optional[str] = None
    app_token: Optional[str] = None
    priority: Optional[int] = Field(default=None, description="Priority. `0` Min, `2` Low, `5` Normal, `8` High.")


class NotificationNtfy(NotificationBase):
    """ntfy.sh or a self-hosted ntfy server."""

    type_suffix = "notification_ntfy"
    implementation_name = "Ntfy"
    config_contract_name = "NtfySettings"
    sensitive = frozenset({"password", "access_token"})

    server_url: Optional[str] = None
    click_url: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    access_token: Optional[str] = None
    priority: Optional[int] = None
    topics: Optional[List[str]] = None
    field_tags: Optional[List[str]] = Field(default=None, description="Tags attached to each ntfy message.")


class NotificationPushbullet(NotificationBase):
    """Pushbullet."""

    type_suffix = "notification_pushbullet"
    implementation_name = "PushBullet"
    config_contract_name = "PushBulletSettings"
    sensitive = frozenset({"api_key"})

    api_key: Optional[str] = None
    sender_id: Optional[str] = None
    device_ids: Optional[List[str]] = None
    channel_tags: Optional[List[str]] = None


IMPLEMENTATIONS = [
    NotificationWebhook,
    NotificationDiscord,
    NotificationEmail,
    NotificationSlack,
    NotificationGotify,
    NotificationNtfy,
    NotificationPushbullet,
]


def register():
    return family_types(Notification, IMPLEMENTATIONS, ENDPOINT, "notifications")
