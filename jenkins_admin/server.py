# server.py

from typing import Any, Dict, Optional

from .client import JenkinsClient
from .config import JenkinsConfig, ScriptTemplates
from .domain import AuthorizationStrategy, Job, ListView, SecurityRealm
from .errors import (
    JenkinsAlreadyExistsError,
    JenkinsClientError,
    JenkinsCreationError,
    JenkinsNotFoundError,
    JenkinsServerError,
)
from .log import get_request_context, logger
from . import scripts


class JenkinsServer:
    """
    Administer a Jenkins server through its script console.

    Existence of jobs and views is never cached: every check runs a script on
    the server and treats empty output as "does not exist". Checks and the
    mutations that follow them are separate requests, so concurrent callers
    can race.

    Example::

        >>> server = JenkinsServer("http://localhost:8080", "admin", "api-token")
        >>> server.create_view("qa")
        >>> server.create_job("nightly")
        >>> server.add_job_to_view("qa", "nightly")
    """

    def __init__(self, url: str, username: Optional[str] = None, password: Optional[str] = None,
                 templates: Optional[ScriptTemplates] = None, timeout: float = 10, verify: bool = True,
                 crumb_cache_minutes: int = 30, client: Optional[JenkinsClient] = None):
        self.templates = templates or ScriptTemplates()
        self.client = client or JenkinsClient(
            url, username, password,
            timeout=timeout,
            verify=verify,
            crumb_cache_minutes=crumb_cache_minutes,
            crumb_path=self.templates.crumb_path
        )

    @classmethod
    def from_config(cls, config: JenkinsConfig, client: Optional[JenkinsClient] = None) -> "JenkinsServer":
        return cls(
            config.url, config.user, config.api_token,
            templates=config.templates,
            timeout=config.timeout,
            verify=config.verify_ssl,
            crumb_cache_minutes=config.crumb_cache_minutes,
            client=client
        )

    # --- Script Execution ---

    def execute_script(self, script: str, context: Optional[Dict[str, Any]] = None) -> str:
        """
        Run a Groovy script in the script console and return its printed output.

        Raises:
            JenkinsServerError: the request failed
        """
        context = context or get_request_context()
        request_id = context.get('request_id', 'N/A')
        logger.debug(f"[{request_id}] Executing script ({len(script)} characters)")

        data = {self.templates.script_parameter: self.templates.script_prefix + script}
        try:
            response = self.client.post_urlencoded(self.templates.script_path, data, context)
        except JenkinsClientError as e:
            raise JenkinsServerError(
                f"Script execution failed: {e.message}",
                suggestion=e.suggestion,
                details=e.details
            ) from e
        return response.text

    def get_version(self, context: Optional[Dict[str, Any]] = None) -> str:
        return self.execute_script(self.templates.get_version, context)

    # --- Views ---

    def get_view_by_name(self, view_name: str, context: Optional[Dict[str, Any]] = None) -> ListView:
        """Raises JenkinsNotFoundError when the view does not exist."""
        output = self.execute_script(scripts.view_name_script(self.templates, view_name), context)
        if not output.strip():
            raise JenkinsNotFoundError(self.templates.view_not_found.format(name=view_name), view_name)
        return ListView(name=view_name)

    def check_view_exists(self, view_name: str, context: Optional[Dict[str, Any]] = None) -> bool:
        try:
            self.get_view_by_name(view_name, context)
        except JenkinsNotFoundError:
            return False
        return True

    def create_view(self, view_name: str, context: Optional[Dict[str, Any]] = None) -> ListView:
        context = context or get_request_context()
        request_id = context.get('request_id', 'N/A')

        if self.check_view_exists(view_name, context):
            raise JenkinsAlreadyExistsError(self.templates.view_already_exists.format(name=view_name), view_name)

        logger.info(f"[{request_id}] Creating view '{view_name}'")
        self.execute_script(scripts.add_view_script(self.templates, view_name), context)

        if not self.check_view_exists(view_name, context):
            raise JenkinsCreationError(self.templates.view_creation_failed.format(name=view_name), view_name)

        logger.info(f"[{request_id}] View '{view_name}' created")
        return ListView(name=view_name)

    # --- Jobs ---

    def get_job_by_name(self, job_name: str, context: Optional[Dict[str, Any]] = None) -> Job:
        """Raises JenkinsNotFoundError when the job does not exist."""
        output = self.execute_script(scripts.job_name_script(self.templates, job_name), context)
        if not output.strip():
            raise JenkinsNotFoundError(self.templates.job_not_found.format(name=job_name), job_name)
        return Job(name=job_name)

    def check_job_exists(self, job_name: str, context: Optional[Dict[str, Any]] = None) -> bool:
        try:
            self.get_job_by_name(job_name, context)
        except JenkinsNotFoundError:
            return False
        return True

    def create_job(self, job_name: str, context: Optional[Dict[str, Any]] = None) -> Job:
        """
        Create an empty freestyle job by posting its config.xml.

        Raises:
            JenkinsAlreadyExistsError: the name is taken; nothing is posted
            JenkinsCreationError: the post failed or the job is missing afterwards
        """
        context = context or get_request_context()
        request_id = context.get('request_id', 'N/A')

        if self.check_job_exists(job_name, context):
            raise JenkinsAlreadyExistsError(self.templates.job_already_exists.format(name=job_name), job_name)

        job = Job(name=job_name)
        logger.info(f"[{request_id}] Creating job '{job_name}'")
        try:
            self.client.post_xml(
                self.templates.create_job_path,
                {self.templates.name_parameter: job_name},
                job.to_xml(),
                context
            )
        except JenkinsClientError as e:
            raise JenkinsCreationError(
                self.templates.job_creation_failed.format(name=job_name),
                job_name,
                suggestion=e.suggestion,
                details=e.details
            ) from e

        if not self.check_job_exists(job_name, context):
            raise JenkinsCreationError(self.templates.job_creation_failed.format(name=job_name), job_name)

        logger.info(f"[{request_id}] Job '{job_name}' created")
        return job

    def add_job_to_view(self, view_name: str, job_name: str, context: Optional[Dict[str, Any]] = None) -> None:
        context = context or get_request_context()
        request_id = context.get('request_id', 'N/A')

        if not self.check_view_exists(view_name, context):
            raise JenkinsNotFoundError(self.templates.view_not_found.format(name=view_name), view_name)
        if not self.check_job_exists(job_name, context):
            raise JenkinsNotFoundError(self.templates.job_not_found.format(name=job_name), job_name)

        logger.info(f"[{request_id}] Adding job '{job_name}' to view '{view_name}'")
        try:
            output = self.execute_script(scripts.add_job_to_view_script(self.templates, view_name, job_name), context)
        except JenkinsServerError as e:
            raise JenkinsServerError(
                f"Error adding job '{job_name}' to view '{view_name}': {e.message}",
                suggestion=e.suggestion,
                details=e.details
            ) from e

        # The console answers 200 even when the script throws.
        failure = scripts.script_failure(output)
        if failure:
            raise JenkinsServerError(
                f"Error adding job '{job_name}' to view '{view_name}': {failure}",
                suggestion=f"Check that '{view_name}' is a list view",
                details=output
            )

    # --- Security ---

    def set_security_realm(self, security_realm: SecurityRealm, context: Optional[Dict[str, Any]] = None) -> str:
        script = scripts.security_realm_script(self.templates, security_realm.render())
        return self.execute_script(script, context)

    def set_authorization_strategy(self, authorization_strategy: AuthorizationStrategy,
                                   context: Optional[Dict[str, Any]] = None) -> str:
        script = scripts.authorization_strategy_script(self.templates, authorization_strategy.render())
        return self.execute_script(script, context)
