"""Remote administration of Jenkins through its script console."""

from .client import JenkinsClient
from .config import JenkinsConfig, ScriptTemplates
from .domain import (
    AuthorizationStrategy,
    FullControlOnceLoggedInAuthorizationStrategy,
    GlobalMatrixAuthorizationStrategy,
    HudsonPrivateSecurityRealm,
    Job,
    LegacyAuthorizationStrategy,
    LegacySecurityRealm,
    ListView,
    NoAuthenticationSecurityRealm,
    SecurityRealm,
    UnsecuredAuthorizationStrategy,
)
from .errors import (
    JenkinsAlreadyExistsError,
    JenkinsAuthenticationError,
    JenkinsClientError,
    JenkinsConnectionError,
    JenkinsCreationError,
    JenkinsError,
    JenkinsNotFoundError,
    JenkinsServerError,
)
from .server import JenkinsServer

__version__ = "0.1.0"
