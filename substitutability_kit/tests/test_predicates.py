"""Tests for rule-based predicates."""

import pytest

from substitutability_kit.errors import ConfigurationError
from substitutability_kit.predicates import contract_from_rule, predicate_from_rule, render

KAA = {"name": "Kaa"}


class TestRender:
    """Template formatting with sample inputs."""

    def test_mapping_sample(self) -> None:
        """Mapping keys become placeholders."""
        assert render("{name} slithers away", KAA) == "Kaa slithers away"

    def test_scalar_sample(self) -> None:
        """Scalars are exposed as {value}."""
        assert render("{value} crawls away", "Rex") == "Rex crawls away"


class TestRules:
    """Each rule type accepts and rejects as documented."""

    def test_eq_template(self) -> None:
        """eq compares against the rendered template."""
        predicate = predicate_from_rule({"type": "eq", "template": "{name} crawls away"})

        assert predicate(KAA, "Kaa crawls away")
        assert not predicate(KAA, "Kaa slithers away")

    def test_eq_value(self) -> None:
        """eq compares against a literal value."""
        predicate = predicate_from_rule({"type": "eq", "value": 4})

        assert predicate(KAA, 4)
        assert not predicate(KAA, 0)

    def test_regex_escapes_sample_values(self) -> None:
        """Substituted values are matched literally."""
        predicate = predicate_from_rule({"type": "regex", "pattern": "^{name} [a-z]+ away$"})

        assert predicate({"name": "K.a"}, "K.a slithers away")
        assert not predicate({"name": "K.a"}, "Kxa slithers away")
        assert not predicate(KAA, 42)

    def test_startswith(self) -> None:
        """startswith checks the rendered prefix."""
        predicate = predicate_from_rule({"type": "startswith", "template": "{name} eats"})

        assert predicate(KAA, "Kaa eats mice")
        assert not predicate(KAA, "Rex eats mice")

    def test_in(self) -> None:
        """in accepts any rendered alternative."""
        predicate = predicate_from_rule({"type": "in", "allowed": ["{name} crawls away", "{name} slithers away"]})

        assert predicate(KAA, "Kaa slithers away")
        assert not predicate(KAA, "Kaa flies away")

    def test_range(self) -> None:
        """range bounds numeric outputs and rejects booleans."""
        predicate = predicate_from_rule({"type": "range", "min": 0, "max": 4})

        assert predicate(KAA, 4)
        assert not predicate(KAA, 5)
        assert not predicate(KAA, True)

    def test_type_is(self) -> None:
        """type_is uses JSON type names."""
        predicate = predicate_from_rule({"type": "type_is", "expected": "string"})

        assert predicate(KAA, "hiss")
        assert not predicate(KAA, None)

    def test_non_empty(self) -> None:
        """non_empty rejects blank strings and empty containers."""
        predicate = predicate_from_rule({"type": "non_empty"})

        assert predicate(KAA, "Kaa moves")
        assert not predicate(KAA, "   ")
        assert not predicate(KAA, [])
        assert predicate(KAA, 0)

    def test_all(self) -> None:
        """all combines rules conjunctively."""
        predicate = predicate_from_rule({
            "type": "all",
            "rules": [{"type": "non_empty"}, {"type": "startswith", "template": "{name}"}],
        })

        assert predicate(KAA, "Kaa hides")
        assert not predicate(KAA, "Rex hides")


class TestInvalidRules:
    """Malformed rules are configuration errors."""

    @pytest.mark.parametrize(
        "rule",
        [
            {"type": "teleport"},
            {"type": "eq"},
            {"type": "regex"},
            {"type": "in", "allowed": "x"},
            {"type": "range"},
            {"type": "all", "rules": []},
            {"type": "regex", "pattern": "^({name} crawls"},
            {"type": "regex", "pattern": "^{name}{2}$"},
            {"type": "range", "min": "abc"},
            {"type": "range", "min": 5, "max": 1},
            {"type": "type_is", "expected": "strnig"},
            {"type": "eq", "template": "{name crawls"},
            {"type": "in", "allowed": ["{} away"]},
            "not a rule",
        ],
    )
    def test_rejected(self, rule) -> None:
        """Each malformed rule raises ConfigurationError."""
        with pytest.raises(ConfigurationError):
            predicate_from_rule(rule)


class TestContractFromRule:
    """Contracts built from rules."""

    def test_description_defaults_to_rule_type(self) -> None:
        """Without a description the rule type is used."""
        contract = contract_from_rule("move", {"type": "non_empty"})

        assert contract.operation == "move"
        assert contract.description == "non_empty"
        assert contract.accepts(KAA, "moves")


class TestRangeBounds:
    """Range bounds are coerced once when the rule is compiled."""

    def test_numeric_strings_accepted(self) -> None:
        """Bounds written as strings in YAML still work."""
        predicate = predicate_from_rule({"type": "range", "min": "0", "max": "2.5"})

        assert predicate(KAA, 2.5)
        assert not predicate(KAA, 3)
