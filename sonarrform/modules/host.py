# encoding: utf-8
"""
Host configuration singleton (``/config/host``).

The server keeps host settings in one flat object; users write them grouped
by concern. The password is write-only: it is never taken from a server
response, only from the plan or from the import identifier.
"""

from typing import Optional

from pydantic import BaseModel, Field

from sonarrform.constants import CREATE, SINGLETON_ID
from sonarrform.diagnostics import Diagnostics, Kind
from sonarrform.engine import SingletonDataSource, SingletonResource
from sonarrform.sensitive import get_value


class HostAuthentication(BaseModel):
    method: Optional[str] = Field(default=None, description="Authentication method. Valid values are 'none', 'basic', 'forms', 'external'.")
    required: Optional[str] = Field(default=None, description="Required for. Valid values are 'enabled' and 'disabledForLocalAddresses'.")
    username: Optional[str] = Field(default=None, description="Username.")
    password: Optional[str] = Field(default=None, description="Password.")
    encrypted_password: Optional[str] = Field(default=None, description="Password as the server stores it.")


class HostProxy(BaseModel):
    enabled: Optional[bool] = None
    type: Optional[str] = Field(default=None, description="Proxy type. Valid values are 'http', 'socks4', 'socks5'.")
    hostname: Optional[str] = None
    port: Optional[int] = None
    username: Optional[str] = None
    password: Optional[str] = None
    bypass_filter: Optional[str] = None
    bypass_local_addresses: Optional[bool] = None


class HostSsl(BaseModel):
    enabled: Optional[bool] = None
    port: Optional[int] = None
    certificate_validation: Optional[str] = Field(default=None, description="Valid values are 'enabled', 'disabledForLocalAddresses', 'disabled'.")
    cert_path: Optional[str] = None
    cert_password: Optional[str] = None


class HostBackup(BaseModel):
    folder: Optional[str] = None
    interval: Optional[int] = Field(default=None, description="Backup interval in days.")
    retention: Optional[int] = Field(default=None, description="Backup retention in days.")


class HostUpdate(BaseModel):
    branch: Optional[str] = None
    update_automatically: Optional[bool] = None
    mechanism: Optional[str] = Field(default=None, description="Valid values are 'builtIn', 'script', 'external', 'apt', 'docker'.")
    script_path: Optional[str] = None


class HostLogging(BaseModel):
    log_level: Optional[str] = Field(default=None, description="File log level. Valid values are 'info', 'debug', 'trace'.")
    console_log_level: Optional[str] = Field(default=None, description="Console log level.")
    log_size_limit: Optional[int] = Field(default=None, description="Log file size limit in MB.")
    analytics_enabled: Optional[bool] = None


class Host(BaseModel):
    id: Optional[int] = Field(default=None, description="Host config ID, always 1.")
    instance_name: Optional[str] = None
    application_url: Optional[str] = None
    bind_address: Optional[str] = None
    port: Optional[int] = None
    url_base: Optional[str] = None
    launch_browser: Optional[bool] = None
    authentication: Optional[HostAuthentication] = None
    proxy: Optional[HostProxy] = None
    ssl: Optional[HostSsl] = None
    backup: Optional[HostBackup] = None
    update: Optional[HostUpdate] = None
    logging: Optional[HostLogging] = None


# Slot path -> wire key
WIRE_KEYS = {
    "instance_name": "instanceName",
    "application_url": "applicationUrl",
    "bind_address": "bindAddress",
    "port": "port",
    "url_base": "urlBase",
    "launch_browser": "launchBrowser",
    "authentication.method": "authenticationMethod",
    "authentication.required": "authenticationRequired",
    "authentication.username": "username",
    "authentication.password": "password",
    "proxy.enabled": "proxyEnabled",
    "proxy.type": "proxyType",
    "proxy.hostname": "proxyHostname",
    "proxy.port": "proxyPort",
    "proxy.username": "proxyUsername",
    "proxy.password": "proxyPassword",
    "proxy.bypass_filter": "proxyBypassFilter",
    "proxy.bypass_local_addresses": "proxyBypassLocalAddresses",
    "ssl.enabled": "enableSsl",
    "ssl.port": "sslPort",
    "ssl.certificate_validation": "certificateValidation",
    "ssl.cert_path": "sslCertPath",
    "ssl.cert_password": "sslCertPassword",
    "backup.folder": "backupFolder",
    "backup.interval": "backupInterval",
    "backup.retention": "backupRetention",
    "update.branch": "branch",
    "update.update_automatically": "updateAutomatically",
    "update.mechanism": "updateMechanism",
    "update.script_path": "updateScriptPath",
    "logging.log_level": "logLevel",
    "logging.console_log_level": "consoleLogLevel",
    "logging.log_size_limit": "logSizeLimit",
    "logging.analytics_enabled": "analyticsEnabled",
}

GROUPS = {
    "authentication": HostAuthentication,
    "proxy": HostProxy,
    "ssl": HostSsl,
    "backup": HostBackup,
    "update": HostUpdate,
    "logging": HostLogging,
}


class HostResource(SingletonResource):
    model = Host
    type_suffix = "host"
    path = "config/host"
    sensitive = frozenset({"authentication.password", "proxy.password", "ssl.cert_password"})

    def build_wire(self, item: Host) -> dict:
        wire = {}
        for path, key in WIRE_KEYS.items():
            value = get_value(item, path)
            if value is not None:
                wire[key] = value

        if "password" in wire:
            wire["passwordConfirmation"] = wire["password"]

        return wire

    def apply_wire(self, wire: dict) -> Host:
        values = {group: {} for group in GROUPS}

        for path, key in WIRE_KEYS.items():
            if path == "authentication.password":
                continue
            if "." in path:
                group, slot = path.split(".", 1)
                values[group][slot] = wire.get(key)
            else:
                values[path] = wire.get(key)

        values["authentication"]["encrypted_password"] = wire.get("password")
        values["id"] = wire.get("id", SINGLETON_ID)
        return Host.model_validate(values)

    def check_plan(self, action, plan: Host, diagnostics: Diagnostics):
        logging = plan.logging
        if action != CREATE or logging is None:
            return

        if logging.log_level is not None and logging.console_log_level is None:
            diagnostics.add_warning(
                Kind.DEPRECATED,
                "logging.console_log_level is now managed on its own and is no longer "
                f"copied from logging.log_level; set it to '{logging.log_level}' to keep "
                "the previous console verbosity.",
            )

    def import_stub(self, identifier: str, cancel=None) -> Host:
        """The identifier of a host import is the current authentication password."""
        if not identifier:
            return Host.model_construct(id=SINGLETON_ID)

        return Host.model_construct(
            id=SINGLETON_ID,
            authentication=HostAuthentication.model_construct(password=identifier),
        )


def register():
    return [HostResource()], [SingletonDataSource(HostResource())]
