"""Input validation pipeline

Each write runs an ordered list of checks. A check names the field it reports
on, a rule that must hold, the message recorded when it does not, and an
optional condition deciding whether the check applies at all. Running the
pipeline yields ``{field: [messages...]}`` in check order; an empty mapping
means the values are valid.
"""

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlsplit

EMAIL_REGEX = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

NATIVE_REDIRECT_URI = "urn:ietf:wg:oauth:2.0:oob"


@dataclass(frozen=True)
class ValidationContext:
    """What the pipeline knows about the write being validated"""

    new_record: bool = True


Rule = Callable[[Any, Mapping[str, Any]], bool]
Condition = Callable[[Mapping[str, Any], ValidationContext], bool]


@dataclass(frozen=True)
class Check:
    field: str
    rule: Rule
    message: str
    condition: Condition | None = None

    def applies(self, values: Mapping[str, Any], context: ValidationContext) -> bool:
        return self.condition is None or self.condition(values, context)


@dataclass
class ValidationPipeline:
    checks: list[Check] = field(default_factory=list)

    def run(
        self,
        values: Mapping[str, Any],
        context: ValidationContext | None = None,
    ) -> dict[str, list[str]]:
        """
        Run every applicable check against values

        Args:
            values: Attribute values being written
            context: Write context (new record or update)

        Returns:
            Mapping of field name to ordered list of violations
        """
        context = context or ValidationContext()
        errors: dict[str, list[str]] = {}

        for check in self.checks:
            if not check.applies(values, context):
                continue
            if not check.rule(values.get(check.field), values):
                messages = errors.setdefault(check.field, [])
                if check.message not in messages:
                    messages.append(check.message)

        return errors


def merge_errors(*error_maps: Mapping[str, list[str]]) -> dict[str, list[str]]:
    """Combine several error mappings, keeping message order"""
    merged: dict[str, list[str]] = {}
    for error_map in error_maps:
        for name, messages in error_map.items():
            bucket = merged.setdefault(name, [])
            bucket.extend(m for m in messages if m not in bucket)
    return merged


# Rules


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return False


def present(value: Any, values: Mapping[str, Any]) -> bool:
    return not is_blank(value)


def email_format(value: Any, values: Mapping[str, Any]) -> bool:
    return isinstance(value, str) and len(value) <= 255 and bool(EMAIL_REGEX.match(value))


def min_length(minimum: int) -> Rule:
    def rule(value: Any, values: Mapping[str, Any]) -> bool:
        return value is not None and len(value) >= minimum

    return rule


def max_bytes(maximum: int) -> Rule:
    def rule(value: Any, values: Mapping[str, Any]) -> bool:
        return value is None or len(str(value).encode("utf-8")) <= maximum

    return rule


def matches_field(other: str) -> Rule:
    def rule(value: Any, values: Mapping[str, Any]) -> bool:
        return value == values.get(other)

    return rule


def redirect_uris(value: Any, values: Mapping[str, Any]) -> bool:
    """Every whitespace-separated URI is absolute, fragment-free, or the native URI"""
    if not isinstance(value, str) or not value.split():
        return False
    for uri in value.split():
        if uri == NATIVE_REDIRECT_URI:
            continue
        parts = urlsplit(uri)
        if not parts.scheme or not parts.netloc or parts.fragment:
            return False
    return True


def scopes_within(allowed: Callable[[], list[str]]) -> Rule:
    def rule(value: Any, values: Mapping[str, Any]) -> bool:
        if is_blank(value):
            return True
        return set(str(value).split()) <= set(allowed())

    return rule


# Conditions


def on_create(values: Mapping[str, Any], context: ValidationContext) -> bool:
    return context.new_record


def when_present(name: str) -> Condition:
    def condition(values: Mapping[str, Any], context: ValidationContext) -> bool:
        return not is_blank(values.get(name))

    return condition


def on_update_when_present(name: str) -> Condition:
    def condition(values: Mapping[str, Any], context: ValidationContext) -> bool:
        return not context.new_record and not is_blank(values.get(name))

    return condition
