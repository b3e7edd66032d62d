"""Declarative form validation and sanitization.

Each form field gets an ordered chain of rules. A rule is a
``(check, sanitize, message)`` triple: the check (if any) decides whether the
current value is acceptable, the sanitizer (if any) transforms it for the
rules that follow. Every chain runs to the end and all failures are collected,
so a handler always sees the complete list of field errors at once::

    rules = [
        body("first_name").trim().is_length(min=1)
        .with_message("First name must be specified.").bail()
        .escape().is_alphanumeric()
        .with_message("First name has non-alphanumeric characters."),
        body("date_of_birth", "Invalid date of birth").optional().is_iso_date().to_date(),
    ]
    result = validate(await request.form(), rules)
    if not result.is_valid:
        ...
"""

import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Any

from markupsafe import escape as escape_markup

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
ALPHANUMERIC_PATTERN = re.compile(r"^[0-9A-Za-z]+$")
INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")

# Range of a signed 64-bit SQL INTEGER column.
MIN_INTEGER = -(2**63)
MAX_INTEGER = 2**63 - 1


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def is_iso_date(value: Any) -> bool:
    """True for a real calendar date written as YYYY-MM-DD."""
    if isinstance(value, date):
        return True
    text = _as_text(value)
    if not ISO_DATE_PATTERN.match(text):
        return False
    try:
        datetime.strptime(text, "%Y-%m-%d")
    except ValueError:
        return False
    return True


def to_date(value: Any) -> date | None:
    if isinstance(value, date):
        return value
    if not is_iso_date(value):
        return None
    return datetime.strptime(_as_text(value), "%Y-%m-%d").date()


def to_int(value: Any) -> int | None:
    """Parse an integer that fits a database id column, else None."""
    if isinstance(value, int):
        number = value
    else:
        text = _as_text(value).strip()
        if not INTEGER_PATTERN.match(text):
            return None
        number = int(text)
    return number if MIN_INTEGER <= number <= MAX_INTEGER else None


@dataclass(frozen=True)
class Rule:
    """One step of a field chain."""

    check: Callable[[Any], bool] | None = None
    sanitize: Callable[[Any], Any] | None = None
    message: str | None = None
    bail: bool = False


@dataclass
class FieldError:
    """A failed check for one field."""

    field: str
    message: str
    value: Any = None


class FieldChain:
    """Ordered rules for one form field, built fluently."""

    def __init__(self, name: str, message: str = "Invalid value") -> None:
        self.name = name
        self.default_message = message
        self.rules: list[Rule] = []
        self.is_optional = False
        self.default: Any = None
        self.many = False

    def _add(self, rule: Rule) -> "FieldChain":
        self.rules.append(rule)
        return self

    # Modifiers

    def optional(self, default: Any = None) -> "FieldChain":
        """Skip the chain when the value is missing or blank; use ``default``.

        A callable default is called each time it is needed.
        """
        self.is_optional = True
        self.default = default
        return self

    def each(self) -> "FieldChain":
        """Treat the field as multi-valued and run the chain on every value."""
        self.many = True
        return self

    def with_message(self, message: str) -> "FieldChain":
        """Set the error message of the most recent check."""
        for index in range(len(self.rules) - 1, -1, -1):
            if self.rules[index].check is not None:
                self.rules[index] = replace(self.rules[index], message=message)
                break
        return self

    def bail(self) -> "FieldChain":
        """Stop this field's chain if it has already failed."""
        return self._add(Rule(bail=True))

    def custom(
        self,
        check: Callable[[Any], bool],
        message: str | None = None,
    ) -> "FieldChain":
        return self._add(Rule(check=check, message=message))

    # Sanitizers

    def trim(self) -> "FieldChain":
        return self._add(Rule(sanitize=lambda v: v.strip() if isinstance(v, str) else v))

    def escape(self) -> "FieldChain":
        """Replace markup-significant characters with HTML entities."""
        return self._add(
            Rule(sanitize=lambda v: str(escape_markup(v)) if isinstance(v, str) else v)
        )

    def to_date(self) -> "FieldChain":
        return self._add(Rule(sanitize=to_date))

    def to_int(self) -> "FieldChain":
        return self._add(Rule(sanitize=to_int))

    # Checks

    def is_length(self, min: int = 0, max: int | None = None) -> "FieldChain":
        def check(value: Any) -> bool:
            length = len(_as_text(value))
            return length >= min and (max is None or length <= max)

        return self._add(Rule(check=check))

    def not_empty(self) -> "FieldChain":
        return self.is_length(min=1)

    def is_alphanumeric(self) -> "FieldChain":
        return self._add(Rule(check=lambda v: bool(ALPHANUMERIC_PATTERN.match(_as_text(v)))))

    def is_iso_date(self) -> "FieldChain":
        return self._add(Rule(check=is_iso_date))

    def is_int(self) -> "FieldChain":
        return self._add(Rule(check=lambda v: to_int(v) is not None))

    def is_in(self, choices: Iterable[Any]) -> "FieldChain":
        allowed = {_as_text(choice) for choice in choices}
        return self._add(Rule(check=lambda v: _as_text(v) in allowed))

    # Evaluation

    def _run_one(self, value: Any) -> tuple[Any, list[str]]:
        messages: list[str] = []
        for rule in self.rules:
            if rule.bail:
                if messages:
                    break
                continue
            if rule.check is not None and not rule.check(value):
                messages.append(rule.message or self.default_message)
            if rule.sanitize is not None:
                value = rule.sanitize(value)
        return value, messages

    def run(self, raw: Any) -> tuple[Any, list[FieldError]]:
        """Apply the chain to a raw value; return the sanitized value and errors."""
        values = raw if self.many else [raw]
        if self.many and not isinstance(values, (list, tuple)):
            values = [] if values in (None, "") else [values]

        if self.is_optional and all(_is_blank(v) for v in values):
            if self.many:
                return [], []
            return (self.default() if callable(self.default) else self.default), []

        sanitized: list[Any] = []
        errors: list[FieldError] = []
        for value in values:
            clean, messages = self._run_one(value)
            sanitized.append(clean)
            errors.extend(FieldError(self.name, message, value) for message in messages)
        return (sanitized if self.many else sanitized[0]), errors


def body(name: str, message: str = "Invalid value") -> FieldChain:
    """Start a rule chain for a form field."""
    return FieldChain(name, message)


@dataclass
class ValidationResult:
    """Aggregated outcome of validating a form."""

    values: dict[str, Any] = field(default_factory=dict)
    submitted: dict[str, Any] = field(default_factory=dict)
    errors: list[FieldError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def errors_for(self, name: str) -> list[str]:
        return [error.message for error in self.errors if error.field == name]


def read_submitted(form: Mapping[str, Any], chains: Iterable[FieldChain]) -> dict[str, Any]:
    """Pull each field's raw value out of a form; multi-valued fields as lists."""
    submitted: dict[str, Any] = {}
    for chain in chains:
        if chain.many:
            getlist = getattr(form, "getlist", None)
            if getlist is not None:
                submitted[chain.name] = list(getlist(chain.name))
            else:
                raw = form.get(chain.name)
                if raw in (None, ""):
                    submitted[chain.name] = []
                else:
                    submitted[chain.name] = list(raw) if isinstance(raw, (list, tuple)) else [raw]
        else:
            submitted[chain.name] = form.get(chain.name, "")
    return submitted


def validate(form: Mapping[str, Any], chains: Iterable[FieldChain]) -> ValidationResult:
    """Run every chain against the form and collect values and errors."""
    chains = list(chains)
    result = ValidationResult(submitted=read_submitted(form, chains))
    for chain in chains:
        value, errors = chain.run(result.submitted[chain.name])
        result.values[chain.name] = value
        result.errors.extend(errors)
    return result
