"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, computed_field

Environment = Literal["development", "production", "test", "demo"]


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Environment = Field(
        default="development", description="Application environment"
    )
    host: str = Field(default="localhost", description="Application host")
    port: int = Field(default=8000, description="Application port")
    session_max_age: int = Field(
        default=7200, description="Session maximum age in seconds"
    )
    home_url: str = Field(
        default="/", description="Landing page after login without an intended URL"
    )
    login_url: str = Field(
        default="/login", description="Login page, also used to collect a missing email"
    )
    logged_out_url: str = Field(
        default="/", description="Landing page after a local logout"
    )

    @property
    def base_url(self) -> str:
        """Construct the base URL from host and port."""
        scheme = "https" if self.environment == "production" else "http"
        return f"{scheme}://{self.host}:{self.port}"


class AuthConfig(BaseModel):
    """Local authentication behaviour."""

    method: Literal["standard", "ldap"] = Field(
        default="standard", description="Primary credential backend"
    )
    registration_role: str = Field(
        default="viewer",
        description="Role attached to newly provisioned users (empty disables)",
    )


class SamlConfig(BaseModel):
    """SAML2 single sign-on configuration."""

    enabled: bool = Field(default=False, description="Enable SAML2 login")
    logout_url: str = Field(
        default="/saml2/logout",
        description="Endpoint that starts the IdP single logout flow",
    )


class LdapConfig(BaseModel):
    """LDAP directory configuration used for group syncing."""

    server: str = Field(default="ldap://localhost:389", description="LDAP server URI")
    bind_dn: str | None = Field(default=None, description="Service account DN")
    bind_password: str | None = Field(
        default=None, description="Service account password"
    )
    base_dn: str = Field(default="dc=example,dc=com", description="Search base DN")
    user_filter: str = Field(
        default="(&(uid={identifier}))",
        description="Filter locating a user entry, {identifier} is substituted",
    )
    group_attribute: str = Field(
        default="memberOf", description="User attribute listing group DNs"
    )
    user_to_groups: bool = Field(
        default=False, description="Sync LDAP groups to local roles on login"
    )
    remove_from_groups: bool = Field(
        default=False, description="Remove roles that no longer match a group"
    )
    timeout_seconds: int = Field(default=10, description="Directory receive timeout")


class SocialDriverConfig(BaseModel):
    """A social (OAuth) login provider shown on the login form."""

    label: str = Field(description="User-visible provider name")
    enabled: bool = Field(default=True, description="Show this provider")


class AvatarConfig(BaseModel):
    """Avatar fetching for newly provisioned users."""

    enabled: bool = Field(default=True, description="Fetch avatars on provisioning")
    url_template: str = Field(
        default="https://www.gravatar.com/avatar/{hash}?s={size}&d=identicon",
        description="Avatar URL, {hash} is the md5 of the email",
    )
    size: int = Field(default=500, description="Requested avatar size in pixels")
    timeout_seconds: float = Field(default=5.0, description="Fetch timeout")


class RedisConfig(BaseModel):
    """Redis configuration model."""

    enabled: bool = Field(default=False, description="Enable Redis session storage")
    url: str = Field(default="", description="Redis connection URL")
    password: str | None = Field(
        default=None, description="Password for Redis authentication"
    )

    @computed_field
    @property
    def connection_string(self) -> str:
        """Construct the Redis connection string with password if provided."""
        if self.password and "@" not in self.url:
            parts = self.url.split("://", 1)
            if len(parts) == 2:
                scheme, rest = parts
                return f"{scheme}://:{self.password}@{rest}"
        return self.url


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="plain", description="Log format")
    file: str | None = Field(default=None, description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


class DatabaseConfig(BaseModel):
    """Database configuration model."""

    url: str = Field(
        default="sqlite:///./signin.db", description="Database connection URL"
    )
    pool_size: int = Field(default=5, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(default=1800, description="Pool recycle time in seconds")


class SecurityConfig(BaseModel):
    """Security configuration for sessions and redirects."""

    secure_cookies: bool = Field(
        default=True, description="Force secure cookies in production"
    )
    cookie_samesite: Literal["lax", "strict", "none"] = Field(
        default="lax", description="SameSite cookie attribute"
    )
    session_cookie_name: str = Field(
        default="session_id", description="Name of the web session cookie"
    )
    allowed_redirect_hosts: list[str] = Field(
        default_factory=list,
        description="Allowed hosts for absolute redirect URLs (empty = relative only)",
    )


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
    auth: AuthConfig = Field(
        default_factory=AuthConfig, description="Authentication configuration"
    )
    saml: SamlConfig = Field(default_factory=SamlConfig, description="SAML2 configuration")
    ldap: LdapConfig = Field(default_factory=LdapConfig, description="LDAP configuration")
    social: dict[str, SocialDriverConfig] = Field(
        default_factory=dict, description="Social login drivers"
    )
    avatar: AvatarConfig = Field(
        default_factory=AvatarConfig, description="Avatar configuration"
    )
    redis: RedisConfig = Field(
        default_factory=RedisConfig, description="Redis configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    security: SecurityConfig = Field(
        default_factory=SecurityConfig, description="Security configuration"
    )
