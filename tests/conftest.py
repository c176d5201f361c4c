import re

import pytest

from jenkins_admin.errors import JenkinsClientError
from jenkins_admin.server import JenkinsServer

_GET_VIEW = re.compile(r"^println\(Jenkins\.instance\.getView\('([^']*)'\)")
_GET_ITEM = re.compile(r"^println\(Jenkins\.instance\.getItem\('([^']*)'\)")
_ADD_VIEW = re.compile(r"^Jenkins\.instance\.addView\(new ListView\('([^']*)'\)\)")
_ADD_TO_VIEW = re.compile(r"^Jenkins\.instance\.getView\('([^']*)'\)\.add\(Jenkins\.instance\.getItem\('([^']*)'\)\)")


class FakeResponse:
    def __init__(self, text: str = "", status_code: int = 200) -> None:
        self.text = text
        self.status_code = status_code


class FakeJenkins:
    """Stands in for JenkinsClient, answering console scripts from in-memory jobs and views."""

    def __init__(self, jobs=(), views=("all",)) -> None:
        self.jobs = set(jobs)
        self.views = set(views)
        self.view_jobs: dict[str, list[str]] = {}
        self.scripts: list[str] = []
        self.xml_posts: list[tuple[str, dict[str, str], str]] = []
        self.script_error: JenkinsClientError | None = None
        self.xml_error: JenkinsClientError | None = None
        self.create_jobs = True
        self.create_views = True
        self.add_to_view_output = ""
        self.version = "2.440.3"

    def post_urlencoded(self, path: str, data: dict[str, str], context: dict) -> FakeResponse:
        assert path == "scriptText"
        script = data["script"]
        self.scripts.append(script)
        if self.script_error is not None:
            raise self.script_error

        match = _GET_VIEW.match(script)
        if match:
            return FakeResponse(f"{match.group(1)}\n" if match.group(1) in self.views else "\n")
        match = _GET_ITEM.match(script)
        if match:
            return FakeResponse(f"{match.group(1)}\n" if match.group(1) in self.jobs else "\n")
        match = _ADD_VIEW.match(script)
        if match:
            if self.create_views:
                self.views.add(match.group(1))
            return FakeResponse("")
        match = _ADD_TO_VIEW.match(script)
        if match:
            if self.add_to_view_output:
                return FakeResponse(self.add_to_view_output)
            self.view_jobs.setdefault(match.group(1), []).append(match.group(2))
            return FakeResponse("")
        if script == "println(Jenkins.instance.version)":
            return FakeResponse(f"{self.version}\n")
        return FakeResponse(f"echo:{script}")

    def post_xml(self, path: str, params: dict[str, str], xml: str, context: dict) -> FakeResponse:
        self.xml_posts.append((path, params, xml))
        if self.xml_error is not None:
            raise self.xml_error
        if self.create_jobs:
            self.jobs.add(params["name"])
        return FakeResponse("")

    def scripts_matching(self, pattern: str) -> list[str]:
        return [script for script in self.scripts if pattern in script]


@pytest.fixture
def fake_jenkins() -> FakeJenkins:
    return FakeJenkins()


@pytest.fixture
def server(fake_jenkins: FakeJenkins) -> JenkinsServer:
    return JenkinsServer("http://jenkins.local:8080", client=fake_jenkins)
