# encoding: utf-8
from typing import Optional

from pydantic import Field

from sonarrform.engine import SingletonDataSource, SingletonResource, WireModel


class SystemStatus(WireModel):
    id: Optional[int] = Field(default=None, description="Always 1.")
    app_name: Optional[str] = None
    instance_name: Optional[str] = None
    version: Optional[str] = Field(default=None, description="Sonarr version.")
    build_time: Optional[str] = None
    startup_path: Optional[str] = None
    app_data: Optional[str] = None
    os_name: Optional[str] = None
    os_version: Optional[str] = None
    is_docker: Optional[bool] = None
    is_linux: Optional[bool] = None
    is_osx: Optional[bool] = None
    is_windows: Optional[bool] = None
    mode: Optional[str] = None
    branch: Optional[str] = None
    authentication: Optional[str] = None
    url_base: Optional[str] = None
    runtime_version: Optional[str] = None
    runtime_name: Optional[str] = None
    start_time: Optional[str] = None
    database_type: Optional[str] = None
    database_version: Optional[str] = None
    package_version: Optional[str] = None
    package_author: Optional[str] = None
    package_update_mechanism: Optional[str] = None


class SystemStatusResource(SingletonResource):
    model = SystemStatus
    type_suffix = "system_status"
    path = "system/status"


def register():
    return [], [SingletonDataSource(SystemStatusResource())]
