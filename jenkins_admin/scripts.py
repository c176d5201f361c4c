# scripts.py

import re
from typing import Iterable, Optional

from .config import ScriptTemplates

_GROOVY_ESCAPES = {
    "\\": "\\\\",
    "'": "\\'",
    "\n": "\\n",
    "\r": "\\r",
}


def groovy_string(value: str) -> str:
    """Escape ``value`` for use inside a single-quoted Groovy string literal."""
    return "".join(_GROOVY_ESCAPES.get(char, char) for char in value)


def join_lines(fragments: Iterable[str]) -> str:
    """Concatenate script fragments, each terminated by a newline."""
    return "".join(f"{fragment}\n" for fragment in fragments)


def view_name_script(templates: ScriptTemplates, name: str) -> str:
    return templates.get_view_name.format(name=groovy_string(name))


def job_name_script(templates: ScriptTemplates, name: str) -> str:
    return templates.get_job_name.format(name=groovy_string(name))


def add_view_script(templates: ScriptTemplates, name: str) -> str:
    return templates.add_view.format(name=groovy_string(name))


def add_job_to_view_script(templates: ScriptTemplates, view_name: str, job_name: str) -> str:
    return templates.add_job_to_view.format(
        view_name=groovy_string(view_name),
        job_name=groovy_string(job_name)
    )


def security_realm_script(templates: ScriptTemplates, fragment: str) -> str:
    return join_lines([
        templates.import_hudson_security,
        fragment,
        templates.jenkins_instance,
        templates.set_security_realm,
        templates.jenkins_save,
    ])


def authorization_strategy_script(templates: ScriptTemplates, fragment: str) -> str:
    return join_lines([
        templates.import_hudson_security,
        fragment,
        templates.jenkins_instance,
        templates.set_authorization_strategy,
        templates.jenkins_save,
    ])


# First line of an uncaught exception as printed by the script console.
_TRACE_HEADER = re.compile(r"^[\w.$]+(?:Exception|Error)\b.*$", re.MULTILINE)


def script_failure(output: str) -> Optional[str]:
    """Return the exception line when console output is a stack trace, else None."""
    match = _TRACE_HEADER.search(output)
    if match and "\tat " in output:
        return match.group(0)
    return None
