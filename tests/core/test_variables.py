"""
Test suite for ScenarioContext variable and function resolution.

System role: Verification of payload placeholder expansion
"""

import re
import uuid

import pytest

from simulator.core.exceptions import UnknownFunctionError, UnknownVariableError
from simulator.core.variables import ScenarioContext


class TestVariables:
    """Test suite for ${name} replacement."""

    def test_replace_should_substitute_known_variables(self) -> None:
        context = ScenarioContext({"name": "Fax", "count": 3})

        assert context.replace("Hello ${name}, ${count} pages") == "Hello Fax, 3 pages"

    def test_replace_should_raise_for_unknown_variable(self, context: ScenarioContext) -> None:
        with pytest.raises(UnknownVariableError) as exc_info:
            context.replace("Hello ${missing}")

        assert exc_info.value.details["variable"] == "missing"

    def test_replace_should_treat_none_as_empty(self, context: ScenarioContext) -> None:
        assert context.replace(None) == ""

    def test_set_variable_should_resolve_references(self, context: ScenarioContext) -> None:
        context.set_variable("first", "A")
        context.set_variable("second", "${first}-B")

        assert context.get_variable("second") == "A-B"

    def test_set_variable_without_resolve_should_store_verbatim(self, context: ScenarioContext) -> None:
        context.set_variable("raw", "${missing} sim:upperCase('x')", resolve=False)

        assert context.get_variable("raw") == "${missing} sim:upperCase('x')"

    def test_substituted_values_should_not_be_resolved_again(self) -> None:
        context = ScenarioContext({"ref": "${total} sim:upperCase('abc')"})

        assert context.replace("ref=${ref}") == "ref=${total} sim:upperCase('abc')"

    def test_get_variable_should_raise_when_undefined(self, context: ScenarioContext) -> None:
        assert not context.has_variable("x")
        with pytest.raises(UnknownVariableError):
            context.get_variable("x")


class TestFunctions:
    """Test suite for sim:function(args) replacement."""

    def test_random_number_should_have_requested_length(self, context: ScenarioContext) -> None:
        result = context.replace("sim:randomNumber(6)")

        assert re.fullmatch(r"\d{6}", result)

    def test_random_uuid_should_be_valid(self, context: ScenarioContext) -> None:
        uuid.UUID(context.replace("sim:randomUUID()"))

    def test_case_functions_should_accept_quoted_arguments(self, context: ScenarioContext) -> None:
        assert context.replace("sim:upperCase('fax')") == "FAX"
        assert context.replace("sim:lowerCase(\"FAX\")") == "fax"

    def test_concat_should_join_arguments_after_variable_replacement(self) -> None:
        context = ScenarioContext({"id": "42"})

        assert context.replace("sim:concat('ref-', ${id})") == "ref-42"

    def test_quoted_commas_should_stay_in_one_argument(self, context: ScenarioContext) -> None:
        assert context.replace("sim:concat('a,b', 'c')") == "a,bc"

    def test_current_date_should_use_format(self, context: ScenarioContext) -> None:
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}", context.replace("sim:currentDate('%Y-%m-%d')"))

    def test_unknown_function_should_raise(self, context: ScenarioContext) -> None:
        with pytest.raises(UnknownFunctionError):
            context.replace("sim:doesNotExist()")
