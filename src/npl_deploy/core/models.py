"""
Deployment data models.

Defines the deployment target configuration, the closed result taxonomy of a
deployment run, and the tenant/application shapes returned by the platform.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DeploymentResult(str, Enum):
    """Outcome of one deployment attempt. Exactly one per attempt."""

    SUCCESS = "success"
    AUTHORIZATION_ERROR = "authorization_error"  # credentials rejected at login
    UNAUTHORIZED = "unauthorized"  # accepted token rejected downstream
    CONNECTION_ERROR = "connection_error"  # transport failure at any step
    VALIDATION_ERROR = "validation_error"  # local precondition or 4xx rejection
    UNKNOWN_ERROR = "unknown_error"

    @property
    def is_success(self) -> bool:
        return self is DeploymentResult.SUCCESS


class DeploymentConfig(BaseModel):
    """
    One deployment target.

    Persisted as camelCase JSON in the workspace and frozen for the
    duration of a run.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    base_url: str = Field(..., alias="baseUrl", description="Platform base URL")
    app_name: str = Field(..., alias="appName", description="Target application id")
    username: str = Field(..., description="Login username, usually an email")
    source_path: str = Field(
        ..., alias="sourcePath", description="Directory packaged on deploy"
    )
    rapid_deploy: bool = Field(
        default=False,
        alias="rapidDeploy",
        description="Clear application state before uploading",
    )
    skip_rapid_deploy_warning: bool = Field(
        default=False,
        alias="skipRapidDeployWarning",
        description="Skip the confirmation before clearing",
    )

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    def to_json_dict(self) -> dict:
        return self.model_dump(by_alias=True)


class DeploymentStatus(BaseModel):
    """Classified outcome of a run, with the upstream message for diagnosis."""

    result: DeploymentResult
    message: str
    detail: Optional[str] = Field(
        None, description="Literal upstream message (HTTP body or transport error)"
    )

    @property
    def success(self) -> bool:
        return self.result.is_success


class Application(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    slug: str = ""
    state: str = ""

    @property
    def is_active(self) -> bool:
        return self.state == "active"


class Tenant(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    slug: str = ""
    state: str = ""
    applications: List[Application] = Field(default_factory=list)

    def active_applications(self) -> List[Application]:
        return [app for app in self.applications if app.is_active]
