# domain.py

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field

from .scripts import groovy_string

# Freestyle project with no SCM, triggers or build steps.
DEFAULT_JOB_XML = '''<?xml version='1.0' encoding='UTF-8'?>
<project>
  <actions/>
  <description></description>
  <keepDependencies>false</keepDependencies>
  <properties/>
  <scm class="hudson.scm.NullSCM"/>
  <canRoam>true</canRoam>
  <disabled>false</disabled>
  <blockBuildWhenDownstreamBuilding>false</blockBuildWhenDownstreamBuilding>
  <blockBuildWhenUpstreamBuilding>false</blockBuildWhenUpstreamBuilding>
  <triggers/>
  <concurrentBuild>false</concurrentBuild>
  <builders/>
  <publishers/>
  <buildWrappers/>
</project>'''


def _groovy_bool(value: bool) -> str:
    return "true" if value else "false"


class Job(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str

    def to_xml(self) -> str:
        """Render the job as the ``config.xml`` document posted on creation."""
        return DEFAULT_JOB_XML


class ListView(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str


# --- Security Realms ---
class SecurityRealm(BaseModel):
    """
    How users authenticate against Jenkins.

    ``render`` returns a Groovy fragment binding the ``securityRealm`` variable,
    evaluated after ``import hudson.security.*``.
    """
    model_config = ConfigDict(frozen=True)

    def render(self) -> str:
        raise NotImplementedError


class HudsonPrivateSecurityRealm(SecurityRealm):
    """Jenkins' own user database, optionally seeded with accounts."""

    allow_signup: bool = False
    users: Dict[str, str] = Field(default_factory=dict)

    def render(self) -> str:
        lines = [f"def securityRealm = new HudsonPrivateSecurityRealm({_groovy_bool(self.allow_signup)})"]
        for username, password in self.users.items():
            lines.append(f"securityRealm.createAccount('{groovy_string(username)}', '{groovy_string(password)}')")
        return "\n".join(lines)


class LegacySecurityRealm(SecurityRealm):
    """Delegate authentication to the servlet container."""

    def render(self) -> str:
        return "def securityRealm = new LegacySecurityRealm()"


class NoAuthenticationSecurityRealm(SecurityRealm):

    def render(self) -> str:
        return "def securityRealm = SecurityRealm.NO_AUTHENTICATION"


# --- Authorization Strategies ---
class AuthorizationStrategy(BaseModel):
    """
    Permission rules applied once a user is authenticated.

    ``render`` returns a Groovy fragment binding the ``authorizationStrategy``
    variable, evaluated after ``import hudson.security.*``.
    """
    model_config = ConfigDict(frozen=True)

    def render(self) -> str:
        raise NotImplementedError


class UnsecuredAuthorizationStrategy(AuthorizationStrategy):

    def render(self) -> str:
        return "def authorizationStrategy = AuthorizationStrategy.UNSECURED"


class LegacyAuthorizationStrategy(AuthorizationStrategy):

    def render(self) -> str:
        return "def authorizationStrategy = new LegacyAuthorizationStrategy()"


class FullControlOnceLoggedInAuthorizationStrategy(AuthorizationStrategy):

    allow_anonymous_read: bool = False

    def render(self) -> str:
        return "\n".join([
            "def authorizationStrategy = new FullControlOnceLoggedInAuthorizationStrategy()",
            f"authorizationStrategy.setAllowAnonymousRead({_groovy_bool(self.allow_anonymous_read)})",
        ])


class GlobalMatrixAuthorizationStrategy(AuthorizationStrategy):
    """
    Matrix-based security (matrix-auth plugin).

    ``permissions`` maps a user or group sid to permission ids such as
    ``hudson.model.Hudson.Administer``.
    """

    permissions: Dict[str, List[str]] = Field(default_factory=dict)

    def render(self) -> str:
        lines = ["def authorizationStrategy = new GlobalMatrixAuthorizationStrategy()"]
        for sid, permission_ids in self.permissions.items():
            for permission_id in permission_ids:
                lines.append(
                    f"authorizationStrategy.add(Permission.fromId('{groovy_string(permission_id)}'), "
                    f"'{groovy_string(sid)}')"
                )
        return "\n".join(lines)
