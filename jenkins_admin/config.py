# config.py

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field


def _to_bool(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class ScriptTemplates(BaseModel):
    """
    Every named script snippet, URL path and message format used against the server.

    Script templates are Groovy fragments; ``{name}``, ``{view_name}`` and
    ``{job_name}`` placeholders receive names already escaped as Groovy
    single-quoted string contents.
    """

    # Endpoints
    script_path: str = "scriptText"
    create_job_path: str = "createItem"
    crumb_path: str = "crumbIssuer/api/json"

    # Form / query parameters
    script_parameter: str = "script"
    name_parameter: str = "name"
    script_prefix: str = ""

    # Queries
    get_version: str = "println(Jenkins.instance.version)"
    get_view_name: str = "println(Jenkins.instance.getView('{name}')?.name ?: '')"
    get_job_name: str = "println(Jenkins.instance.getItem('{name}')?.name ?: '')"

    # Mutations
    add_view: str = "Jenkins.instance.addView(new ListView('{name}'))"
    add_job_to_view: str = "Jenkins.instance.getView('{view_name}').add(Jenkins.instance.getItem('{job_name}'))"

    # Security configuration
    import_hudson_security: str = "import hudson.security.*"
    jenkins_instance: str = "def instance = Jenkins.getInstance()"
    set_security_realm: str = "instance.setSecurityRealm(securityRealm)"
    set_authorization_strategy: str = "instance.setAuthorizationStrategy(authorizationStrategy)"
    jenkins_save: str = "instance.save()"

    # Messages
    view_not_found: str = "View '{name}' does not exist"
    view_already_exists: str = "View '{name}' already exists"
    view_creation_failed: str = "Error creating view '{name}'"
    job_not_found: str = "Job '{name}' does not exist"
    job_already_exists: str = "Job '{name}' already exists"
    job_creation_failed: str = "Error creating job '{name}'"


class JenkinsConfig(BaseModel):
    """
    Connection settings for a Jenkins server.

    Environment Variables (read by ``from_env``):
        JENKINS_URL: Jenkins server URL (default: http://localhost:8080)
        JENKINS_USER: Jenkins username for authentication
        JENKINS_API_TOKEN: Jenkins API token or password
        JENKINS_DEFAULT_TIMEOUT: Request timeout in seconds (default: 10)
        JENKINS_CRUMB_CACHE_MINUTES: CSRF crumb cache duration in minutes (default: 30)
        JENKINS_VERIFY_SSL: Verify TLS certificates (default: true)
        MCP_PORT: MCP server port (default: 8010)
        MCP_HOST: MCP server host (default: 0.0.0.0)
    """

    url: str = "http://localhost:8080"
    user: Optional[str] = None
    api_token: Optional[str] = None
    timeout: float = 10
    crumb_cache_minutes: int = 30
    verify_ssl: bool = True
    host: str = "0.0.0.0"
    port: int = 8010
    templates: ScriptTemplates = Field(default_factory=ScriptTemplates)

    @classmethod
    def from_env(cls) -> "JenkinsConfig":
        load_dotenv()
        return cls(
            url=os.getenv("JENKINS_URL", "http://localhost:8080"),
            user=os.getenv("JENKINS_USER"),
            api_token=os.getenv("JENKINS_API_TOKEN"),
            timeout=float(os.getenv("JENKINS_DEFAULT_TIMEOUT", "10")),
            crumb_cache_minutes=int(os.getenv("JENKINS_CRUMB_CACHE_MINUTES", "30")),
            verify_ssl=_to_bool(os.getenv("JENKINS_VERIFY_SSL"), default=True),
            host=os.getenv("MCP_HOST", "0.0.0.0"),
            port=int(os.getenv("MCP_PORT", "8010")),
        )
