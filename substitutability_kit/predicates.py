"""Rule-based contract predicates.

Compiles declarative rule dicts into pure ``(input, output) -> bool``
predicates. No code is executed from declarations; template strings are only
formatted with the sample input.

Rule format (minimal, stable):

    {"type": "non_empty"}
    {"type": "type_is", "expected": "string"}
    {"type": "eq", "template": "{name} crawls away"}       # or "value": <literal>
    {"type": "startswith", "template": "{name} "}
    {"type": "regex", "pattern": "^{name} (crawls|slithers) away$"}
    {"type": "in", "allowed": ["{name} crawls away", "{name} slithers away"]}
    {"type": "range", "min": 0, "max": 1}
    {"type": "all", "rules": [<rule>, ...]}
"""
from __future__ import annotations

import re
from collections import defaultdict
from typing import Any, Callable, Dict, List, Mapping, Optional

from .contracts import Contract, Predicate
from .errors import ConfigurationError


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    return "unknown"


TYPE_NAMES = frozenset({"null", "boolean", "number", "string", "array", "object"})


def _safe_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    return None


def template_fields(sample: Any) -> Dict[str, Any]:
    """Fields available to ``{placeholders}``: mapping keys, or ``value`` for scalars."""
    if isinstance(sample, Mapping):
        return dict(sample)
    return {"value": sample}


def render(template: str, sample: Any) -> str:
    return template.format_map(template_fields(sample))


def _render_pattern(pattern: str, sample: Any) -> str:
    escaped = {k: re.escape(str(v)) for k, v in template_fields(sample).items()}
    return pattern.format_map(escaped)


def validate_template(template: str, what: str = "template") -> str:
    """Render ``template`` with blank fields; raises ConfigurationError if it cannot be formatted."""
    try:
        return template.format_map(defaultdict(str))
    except (ValueError, IndexError, KeyError, AttributeError) as exc:
        raise ConfigurationError(f"invalid {what} {template!r}: {exc}") from exc


def _non_empty(rule: Dict[str, Any]) -> Predicate:
    def predicate(sample: Any, output: Any) -> bool:
        if isinstance(output, str):
            return bool(output.strip())
        try:
            return len(output) > 0
        except TypeError:
            return output is not None
    return predicate


def _type_is(rule: Dict[str, Any]) -> Predicate:
    expected = str(rule.get("expected") or "")
    if not expected:
        raise ConfigurationError("type_is rule requires 'expected'")
    if expected not in TYPE_NAMES:
        raise ConfigurationError(f"type_is rule: unknown type name '{expected}', expected one of {sorted(TYPE_NAMES)}")
    return lambda sample, output: _type_name(output) == expected


def _eq(rule: Dict[str, Any]) -> Predicate:
    if "template" in rule:
        template = str(rule["template"])
        validate_template(template)
        return lambda sample, output: output == render(template, sample)
    if "value" in rule:
        value = rule["value"]
        return lambda sample, output: output == value
    raise ConfigurationError("eq rule requires 'template' or 'value'")


def _startswith(rule: Dict[str, Any]) -> Predicate:
    template = str(rule.get("template") or "")
    if not template:
        raise ConfigurationError("startswith rule requires 'template'")
    validate_template(template)
    return lambda sample, output: isinstance(output, str) and output.startswith(render(template, sample))


def _regex(rule: Dict[str, Any]) -> Predicate:
    pattern = str(rule.get("pattern") or "")
    if not pattern:
        raise ConfigurationError("regex rule requires 'pattern'")
    try:
        re.compile(validate_template(pattern, "pattern"))
    except re.error as exc:
        raise ConfigurationError(f"regex rule: invalid pattern {pattern!r}: {exc}") from exc

    def predicate(sample: Any, output: Any) -> bool:
        if not isinstance(output, str):
            return False
        return bool(re.match(_render_pattern(pattern, sample), output))
    return predicate


def _in(rule: Dict[str, Any]) -> Predicate:
    allowed = rule.get("allowed")
    if not isinstance(allowed, list):
        raise ConfigurationError("in rule requires an 'allowed' list")
    for item in allowed:
        if isinstance(item, str):
            validate_template(item)

    def predicate(sample: Any, output: Any) -> bool:
        for item in allowed:
            candidate = render(item, sample) if isinstance(item, str) else item
            if output == candidate:
                return True
        return False
    return predicate


def _range(rule: Dict[str, Any]) -> Predicate:
    min_v = rule.get("min")
    max_v = rule.get("max")
    if min_v is None and max_v is None:
        raise ConfigurationError("range rule requires 'min' and/or 'max'")
    try:
        low = None if min_v is None else float(min_v)
        high = None if max_v is None else float(max_v)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"range rule: bounds must be numeric (min={min_v!r}, max={max_v!r})") from exc
    if low is not None and high is not None and low > high:
        raise ConfigurationError(f"range rule: min {low} exceeds max {high}")

    def predicate(sample: Any, output: Any) -> bool:
        value_f = _safe_float(output)
        if value_f is None:
            return False
        ok = True
        if low is not None:
            ok = ok and (value_f >= low)
        if high is not None:
            ok = ok and (value_f <= high)
        return ok
    return predicate


def _all(rule: Dict[str, Any]) -> Predicate:
    rules = rule.get("rules")
    if not isinstance(rules, list) or not rules:
        raise ConfigurationError("all rule requires a non-empty 'rules' list")
    parts: List[Predicate] = [predicate_from_rule(r) for r in rules]
    return lambda sample, output: all(p(sample, output) for p in parts)


RULE_TYPES: Dict[str, Callable[[Dict[str, Any]], Predicate]] = {
    "non_empty": _non_empty,
    "type_is": _type_is,
    "eq": _eq,
    "startswith": _startswith,
    "regex": _regex,
    "in": _in,
    "range": _range,
    "all": _all,
}


def predicate_from_rule(rule: Mapping[str, Any]) -> Predicate:
    """Compile one rule dict into a predicate; raises ConfigurationError if invalid."""
    if not isinstance(rule, Mapping):
        raise ConfigurationError("Invalid rule (not an object)")
    rule = dict(rule)
    rule_type = str(rule.get("type") or "").strip().lower()
    builder = RULE_TYPES.get(rule_type)
    if builder is None:
        raise ConfigurationError(f"unknown_rule_type:{rule_type}")
    return builder(rule)


def contract_from_rule(operation: str, rule: Mapping[str, Any], description: str = "") -> Contract:
    return Contract(
        operation=operation,
        predicate=predicate_from_rule(rule),
        description=description or str(rule.get("description") or rule.get("type") or ""),
    )
