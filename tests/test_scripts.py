from jenkins_admin import scripts
from jenkins_admin.config import ScriptTemplates


def test_groovy_string_escapes_quotes_and_newlines() -> None:
    assert scripts.groovy_string("it's") == "it\\'s"
    assert scripts.groovy_string("a\\b") == "a\\\\b"
    assert scripts.groovy_string("x')\nJenkins.instance.doSafeExit(null)//") == (
        "x\\')\\nJenkins.instance.doSafeExit(null)//"
    )


def test_plain_names_are_substituted_unchanged() -> None:
    templates = ScriptTemplates()

    script = scripts.view_name_script(templates, "release-2.x_QA")

    assert script == "println(Jenkins.instance.getView('release-2.x_QA')?.name ?: '')"


def test_job_name_script_queries_items() -> None:
    assert scripts.job_name_script(ScriptTemplates(), "nightly") == (
        "println(Jenkins.instance.getItem('nightly')?.name ?: '')"
    )


def test_injection_stays_inside_the_string_literal() -> None:
    script = scripts.add_view_script(ScriptTemplates(), "qa')); Jenkins.instance.doRestart(); ('")

    assert script == "Jenkins.instance.addView(new ListView('qa\\')); Jenkins.instance.doRestart(); (\\''))"


def test_add_job_to_view_script_places_both_names() -> None:
    script = scripts.add_job_to_view_script(ScriptTemplates(), "qa", "nightly")

    assert script == "Jenkins.instance.getView('qa').add(Jenkins.instance.getItem('nightly'))"


def test_join_lines_terminates_every_fragment() -> None:
    assert scripts.join_lines(["a", "b\nc", ""]) == "a\nb\nc\n\n"


def test_security_scripts_keep_fragment_order() -> None:
    templates = ScriptTemplates(
        import_hudson_security="IMPORT",
        jenkins_instance="INSTANCE",
        set_security_realm="SET_REALM",
        set_authorization_strategy="SET_STRATEGY",
        jenkins_save="SAVE",
    )

    assert scripts.security_realm_script(templates, "REALM") == "IMPORT\nREALM\nINSTANCE\nSET_REALM\nSAVE\n"
    assert scripts.authorization_strategy_script(templates, "STRATEGY") == (
        "IMPORT\nSTRATEGY\nINSTANCE\nSET_STRATEGY\nSAVE\n"
    )


def test_script_failure_reads_console_stack_traces() -> None:
    trace = (
        "java.lang.NullPointerException: Cannot invoke method add() on null object\n"
        "\tat org.codehaus.groovy.runtime.NullObject.invokeMethod(NullObject.java:91)\n"
    )

    assert scripts.script_failure(trace) == "java.lang.NullPointerException: Cannot invoke method add() on null object"
    assert scripts.script_failure("") is None
    assert scripts.script_failure("ErrorReporter configured\n") is None
