# mcp_server.py

import argparse
import sys
from typing import Any, Dict, Optional

from mcp.server.fastmcp import FastMCP
from pydantic import BaseModel

from .config import JenkinsConfig
from .errors import create_error_response
from .log import get_request_context, logger
from .server import JenkinsServer


# Pydantic models
class VersionResponse(BaseModel):
    version: str
    url: str


class ScriptResponse(BaseModel):
    output: str


class ExistsResponse(BaseModel):
    name: str
    kind: str  # "job" or "view"
    exists: bool


class CreateResponse(BaseModel):
    name: str
    kind: str
    status: str = "Created"


class AddJobToViewResponse(BaseModel):
    view_name: str
    job_name: str
    status: str = "Added"


class HealthCheckResponse(BaseModel):
    status: str
    details: Optional[str] = None


mcp = FastMCP("jenkins_admin")

_config: Optional[JenkinsConfig] = None
_server: Optional[JenkinsServer] = None


def get_config() -> JenkinsConfig:
    global _config
    if _config is None:
        _config = JenkinsConfig.from_env()
    return _config


def get_server() -> JenkinsServer:
    global _server
    if _server is None:
        _server = JenkinsServer.from_config(get_config())
    return _server


# --- MCP Tools ---

@mcp.tool()
def get_version() -> Dict[str, Any]:
    """Get the Jenkins server version."""
    context = get_request_context()
    logger.info(f"[{context['request_id']}] Received request for server version")
    try:
        version = get_server().get_version(context).strip()
        logger.info(f"[{context['request_id']}] Jenkins version: {version}")
        return {"result": VersionResponse(version=version, url=get_config().url).model_dump()}
    except Exception as e:
        return create_error_response(e, context, "version lookup")


@mcp.tool()
def run_script(script: str) -> Dict[str, Any]:
    """
    Execute a Groovy script in the Jenkins script console.

    Args:
        script: Groovy source; anything it prints is returned as output
    """
    context = get_request_context()
    logger.info(f"[{context['request_id']}] Received request to run a script ({len(script)} characters)")
    try:
        output = get_server().execute_script(script, context)
        return {"result": ScriptResponse(output=output).model_dump()}
    except Exception as e:
        return create_error_response(e, context, "script execution")


@mcp.tool()
def job_exists(job_name: str) -> Dict[str, Any]:
    """Check whether a job exists."""
    context = get_request_context()
    logger.info(f"[{context['request_id']}] Received request to check job: '{job_name}'")
    try:
        exists = get_server().check_job_exists(job_name, context)
        return {"result": ExistsResponse(name=job_name, kind="job", exists=exists).model_dump()}
    except Exception as e:
        return create_error_response(e, context, f"job check for '{job_name}'")


@mcp.tool()
def view_exists(view_name: str) -> Dict[str, Any]:
    """Check whether a view exists."""
    context = get_request_context()
    logger.info(f"[{context['request_id']}] Received request to check view: '{view_name}'")
    try:
        exists = get_server().check_view_exists(view_name, context)
        return {"result": ExistsResponse(name=view_name, kind="view", exists=exists).model_dump()}
    except Exception as e:
        return create_error_response(e, context, f"view check for '{view_name}'")


@mcp.tool()
def create_job(job_name: str) -> Dict[str, Any]:
    """Create an empty freestyle job."""
    context = get_request_context()
    logger.info(f"[{context['request_id']}] Received request to create job: '{job_name}'")
    try:
        get_server().create_job(job_name, context)
        return {"result": CreateResponse(name=job_name, kind="job").model_dump()}
    except Exception as e:
        return create_error_response(e, context, f"job creation for '{job_name}'")


@mcp.tool()
def create_view(view_name: str) -> Dict[str, Any]:
    """Create an empty list view."""
    context = get_request_context()
    logger.info(f"[{context['request_id']}] Received request to create view: '{view_name}'")
    try:
        get_server().create_view(view_name, context)
        return {"result": CreateResponse(name=view_name, kind="view").model_dump()}
    except Exception as e:
        return create_error_response(e, context, f"view creation for '{view_name}'")


@mcp.tool()
def add_job_to_view(view_name: str, job_name: str) -> Dict[str, Any]:
    """
    Add an existing job to an existing list view.

    Args:
        view_name: Name of the list view
        job_name: Name of the job
    """
    context = get_request_context()
    logger.info(f"[{context['request_id']}] Received request to add job '{job_name}' to view '{view_name}'")
    try:
        get_server().add_job_to_view(view_name, job_name, context)
        return {"result": AddJobToViewResponse(view_name=view_name, job_name=job_name).model_dump()}
    except Exception as e:
        return create_error_response(e, context, f"adding job '{job_name}' to view '{view_name}'")


@mcp.resource("status://health")
def get_health() -> HealthCheckResponse:
    """
    Performs a health check on the server and its connection to Jenkins.
    """
    try:
        version = get_server().get_version().strip()
        if not version:
            raise ValueError("Script console returned no version.")

        logger.info("Health check successful: Connected to Jenkins.")
        return HealthCheckResponse(status="ok", details=f"Jenkins {version}")

    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return HealthCheckResponse(status="error", details=f"Failed to connect to Jenkins: {str(e)}")


def main():
    config = get_config()

    parser = argparse.ArgumentParser(description="Jenkins Admin MCP Server", add_help=False)
    parser.add_argument("--transport", type=str, default="stdio",
                        help="Transport type (stdio|streamable-http) [default: stdio]")
    parser.add_argument("--port", type=int, default=config.port,
                        help=f"Port for the MCP server (default: {config.port} or from MCP_PORT env var)")
    parser.add_argument("--host", type=str, default=config.host,
                        help=f"Host for the MCP server (default: {config.host} or from MCP_HOST env var)")
    args, unknown = parser.parse_known_args()

    if not config.user or not config.api_token:
        logger.error("Missing Jenkins credentials. Please set JENKINS_USER and JENKINS_API_TOKEN.")
        sys.exit(1)

    mcp.settings.host = args.host
    mcp.settings.port = args.port

    try:
        sys.argv = [sys.argv[0]] + unknown
        if args.transport == "stdio":
            logger.info("Starting Jenkins Admin MCP server in STDIO mode")
            mcp.run()
        else:
            logger.info(f"Starting Jenkins Admin MCP server in {args.transport} mode on port {args.port}")
            mcp.run(transport=args.transport)
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Failed to start Jenkins Admin MCP server: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
