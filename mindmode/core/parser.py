"""
Parser — Command line to ParsedCommand, plus argument validation

Grammar:
    <command-name> [<positional> ...] [--<flag> [<value>]] ...

Pipeline:
    parse_command(text)            -> ParseResult (never raises)
    validate_command(parsed, specs) -> ParseResult with defaults filled in
    apply_arg_specs(parsed, specs)  -> ParsedCommand, raises ValidationError
    generate_suggestions(text, commands) -> "did you mean" candidates
"""

import math
import re
from typing import Dict, List, Optional, Sequence, Tuple, Union

from rapidfuzz.distance import Levenshtein

from .errors import ParseError, ValidationError
from .tokenizer import tokenize
from .types import ArgSpec, ArgType, ArgValue, Args, Command, ParseResult, ParsedCommand


FLAG_PREFIX = "--"
INT_PATTERN = re.compile(r"^-?\d+$")
FLOAT_PATTERN = re.compile(r"^-?\d*\.\d+$")

MAX_SUGGESTIONS = 10
MAX_EDIT_DISTANCE = 2


def parse_value(token: str) -> ArgValue:
    """
    Coerce a raw token to a primitive.

    Purely syntactic: only the exact patterns below are converted, so ids
    like "node-12" or "007a" stay strings.

    Examples:
        >>> parse_value("true"), parse_value("42"), parse_value("3.14")
        (True, 42, 3.14)
        >>> parse_value("'x y'")
        'x y'
    """
    if token == "true":
        return True
    if token == "false":
        return False
    if INT_PATTERN.match(token):
        return int(token)
    if FLOAT_PATTERN.match(token):
        return float(token)
    if len(token) >= 2 and token[0] == token[-1] and token[0] in ('"', "'"):
        return token[1:-1]
    return token


def parse_arguments(tokens: Sequence[str]) -> Args:
    """
    Build the argument map from the tokens after the command name.

    "--flag value" consumes the next token unless it is missing or is itself
    a flag, in which case the flag is True. Other tokens are positional and
    keyed "_<index>" by their index in tokens.
    """
    values: Dict[str, ArgValue] = {}
    i = 0
    while i < len(tokens):
        token = tokens[i]
        if not token:
            i += 1
            continue

        if token.startswith(FLAG_PREFIX):
            name = token[len(FLAG_PREFIX):]
            following = tokens[i + 1] if i + 1 < len(tokens) else None
            if following and not following.startswith(FLAG_PREFIX):
                values[name] = parse_value(following)
                i += 2
            else:
                values[name] = True
                i += 1
        else:
            values[f"_{i}"] = parse_value(token)
            i += 1

    return Args(values)


def parse_command(text: str) -> ParseResult:
    """
    Parse a raw command line.

    Returns:
        ParseResult; tokenizer failures are reported, not raised
    """
    trimmed = (text or "").strip()
    if not trimmed:
        return ParseResult(success=False, error="Empty command")

    try:
        tokens = tokenize(trimmed)
    except ParseError as e:
        return ParseResult(success=False, error=str(e))

    if not tokens:
        return ParseResult(success=False, error="No valid tokens found")

    parsed = ParsedCommand(name=tokens[0], args=parse_arguments(tokens[1:]), raw_input=trimmed)
    return ParseResult(success=True, command=parsed)


# =============================================================================
# Validation
# =============================================================================

def _normalize(value: ArgValue, spec: ArgSpec) -> Tuple[bool, ArgValue]:
    """
    Normalize a present value for its declared type.

    Returns:
        (True, normalized value) or (False, error message)
    """
    arg_type = ArgType(spec.type)

    if arg_type == ArgType.STRING:
        return True, value if isinstance(value, str) else _stringify(value)

    if arg_type == ArgType.NUMBER:
        number = _to_number(value)
        if number is None:
            return False, f"Argument '{spec.name}' must be a number"
        return True, number

    if arg_type == ArgType.BOOLEAN:
        if isinstance(value, bool):
            return True, value
        if isinstance(value, str) and value.lower() in ("true", "false"):
            return True, value.lower() == "true"
        return False, f"Argument '{spec.name}' must be a boolean"

    if arg_type == ArgType.NODE_ID:
        text = value if isinstance(value, str) else _stringify(value)
        if text.strip():
            return True, text
        return False, f"Argument '{spec.name}' must be a valid node ID"

    return True, value


def _stringify(value: ArgValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _to_number(value: ArgValue) -> Optional[Union[int, float]]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return None if isinstance(value, float) and math.isnan(value) else value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        if INT_PATTERN.match(text):
            return int(text)
        try:
            number = float(text)
        except ValueError:
            return None
        return None if math.isnan(number) else number
    return None


def apply_arg_specs(parsed: ParsedCommand, specs: Sequence[ArgSpec]) -> ParsedCommand:
    """
    Check parsed arguments against declared argument specs.

    Missing required args and type mismatches are all collected before
    failing. Defaults are filled into a new ParsedCommand.

    Args:
        parsed: Output of parse_command
        specs: Declared arguments of the resolved command

    Returns:
        ParsedCommand with normalized values and defaults

    Raises:
        ValidationError: With every violation found
    """
    if not specs:
        return parsed

    errors: List[str] = []
    values = parsed.args.to_dict()

    for spec in specs:
        present = spec.name in values

        if spec.required and not present:
            errors.append(f"Required argument '{spec.name}' is missing")
            continue

        if not present:
            if spec.has_default:
                values[spec.name] = spec.default
            continue

        ok, result = _normalize(values[spec.name], spec)
        if ok:
            values[spec.name] = result
        else:
            errors.append(result)

    if errors:
        raise ValidationError(errors)

    return ParsedCommand(name=parsed.name, args=Args(values), raw_input=parsed.raw_input)


def validate_command(parsed: ParsedCommand, specs: Sequence[ArgSpec]) -> ParseResult:
    """
    Result-returning form of apply_arg_specs.

    Returns:
        ParseResult with the augmented command, or the comma-joined errors
    """
    try:
        return ParseResult(success=True, command=apply_arg_specs(parsed, specs))
    except ValidationError as e:
        return ParseResult(success=False, error=str(e))


# =============================================================================
# Suggestions
# =============================================================================

def generate_suggestions(text: str, commands: Sequence[Command]) -> List[str]:
    """
    Candidate command names for partial or mistyped input.

    Order: name prefixes, alias prefixes, then names within edit
    distance 2. Duplicates removed, at most 10 returned. Empty input
    returns the first 10 command names.
    """
    query = (text or "").strip().lower()
    if not query:
        return [cmd.name for cmd in commands[:MAX_SUGGESTIONS]]

    suggestions: List[str] = []

    for cmd in commands:
        if cmd.name.lower().startswith(query):
            suggestions.append(cmd.name)

    for cmd in commands:
        for alias in cmd.aliases:
            if alias.lower().startswith(query):
                suggestions.append(alias)

    for cmd in commands:
        if len(suggestions) >= MAX_SUGGESTIONS:
            break
        if Levenshtein.distance(query, cmd.name.lower()) <= MAX_EDIT_DISTANCE:
            suggestions.append(cmd.name)

    return list(dict.fromkeys(suggestions))[:MAX_SUGGESTIONS]
