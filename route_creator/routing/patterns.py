"""Readable endpoint patterns and their router matchers.

Endpoints are declared with ``{name}`` placeholders, e.g. ``/books/{book_id}``.
Each placeholder matches one path segment made of letters, digits and hyphens.
"""
import re

from starlette.convertors import CONVERTOR_TYPES, Convertor, register_url_convertor

PLACEHOLDER = re.compile(r"\{([a-zA-Z0-9_]+)\}")
SEGMENT_REGEX = "[a-zA-Z0-9-]+"
CONVERTOR_NAME = "token"


class TokenConvertor(Convertor):
    """Starlette path convertor for a single ``[a-zA-Z0-9-]+`` segment."""

    regex = SEGMENT_REGEX

    def convert(self, value: str) -> str:
        return value

    def to_string(self, value: str) -> str:
        value = str(value)
        if not re.fullmatch(SEGMENT_REGEX, value):
            raise ValueError(f"{value!r} is not a valid path token")
        return value


def translate_pattern(endpoint: str) -> str:
    """Replace each ``{name}`` with a named capture group.

    Text that is not a well-formed placeholder is left as is. The result is
    not guarded against being translated twice.
    """
    return PLACEHOLDER.sub(
        lambda match: f"(?P<{match.group(1)}>{SEGMENT_REGEX})", endpoint
    )


def compile_pattern(endpoint: str) -> re.Pattern:
    """Compile the translated endpoint into an anchored regex."""
    return re.compile(f"^{translate_pattern(endpoint)}$")


def to_host_path(endpoint: str) -> str:
    """Rewrite placeholders into Starlette's ``{name:token}`` syntax.

    Starlette compiles ``{name:token}`` to the same capture group that
    :func:`translate_pattern` produces.
    """
    return PLACEHOLDER.sub(
        lambda match: f"{{{match.group(1)}:{CONVERTOR_NAME}}}", endpoint
    )


def register_token_convertor() -> None:
    if CONVERTOR_NAME not in CONVERTOR_TYPES:
        register_url_convertor(CONVERTOR_NAME, TokenConvertor())
