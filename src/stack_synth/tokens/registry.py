"""Token registry: minting, lookup and string/number encoding of tokens.

A registry belongs to exactly one synthesis run (one ``App``). Encoded markers
carry the run id, so a marker leaking from another run is reported instead of
silently resolving to an unrelated producer.

String encoding::

    ${Token[<hint>.<id>@<run>]}

Number encoding reserves the finite negative doubles whose top 16 bits are
``0xFBFF``; the low 48 bits carry the token id.
"""

from __future__ import annotations

import itertools
import logging
import re
import struct
import uuid
from collections.abc import Mapping
from typing import Any

from stack_synth.errors import MalformedTokenError
from stack_synth.tokens.token import Resolvable, Token

logger = logging.getLogger(__name__)

_MARKER_RE = re.compile(
    r"\$\{Token\[(?P<hint>[A-Za-z0-9_-]*)\.(?P<id>\d+)@(?P<run>[0-9a-f]{8})\]\}"
)
_HINT_STRIP_RE = re.compile(r"[^A-Za-z0-9_-]")

_DOUBLE_MARKER = 0xFBFF
_DOUBLE_ID_BITS = 48
_DOUBLE_ID_MASK = (1 << _DOUBLE_ID_BITS) - 1


def contains_token_marker(value: str) -> bool:
    """Whether *value* contains anything that looks like an encoded token."""
    return _MARKER_RE.search(value) is not None


class TokenRegistry:
    """Append-only token store for one synthesis run."""

    def __init__(self, run_id: str | None = None) -> None:
        self._run_id = run_id or uuid.uuid4().hex[:8]
        self._tokens: dict[int, Token] = {}
        self._ids = itertools.count(1)

    @property
    def run_id(self) -> str:
        return self._run_id

    def __len__(self) -> int:
        return len(self._tokens)

    # ── Minting / lookup ─────────────────────────────────────────────

    def mint(self, producer: Resolvable, display_hint: str | None = None) -> Token:
        """Allocate a fresh token for *producer*."""
        hint = display_hint or getattr(producer, "display_hint", None) or "TOKEN"
        hint = _HINT_STRIP_RE.sub("", hint) or "TOKEN"
        token = Token(id=next(self._ids), run_id=self._run_id, producer=producer, display_hint=hint)
        self._tokens[token.id] = token
        logger.debug("Minted %r", token)
        return token

    def token(self, identifier: int | str) -> Token:
        """Return the token for an integer id or an encoded string marker."""
        if isinstance(identifier, str):
            return self.decode(identifier)
        try:
            return self._tokens[identifier]
        except KeyError as e:
            raise MalformedTokenError(str(identifier), "no token with this id in this run") from e

    def lookup(self, identifier: int | str) -> Resolvable:
        """Return the producer registered under *identifier*."""
        return self.token(identifier).producer

    def verify(self, token: Token) -> Token:
        """Ensure *token* was minted by this registry."""
        if token.run_id != self._run_id or self._tokens.get(token.id) is not token:
            raise MalformedTokenError(
                repr(token), f"token belongs to run {token.run_id}, not {self._run_id}"
            )
        return token

    # ── String encoding ──────────────────────────────────────────────

    def encode(self, value: Any) -> Any:
        """Encode a token (or a resolvable, minting it first) as a string marker.

        Any other value is returned unchanged.
        """
        if isinstance(value, Resolvable):
            value = self.mint(value)
        if isinstance(value, Token):
            self.verify(value)
            return f"${{Token[{value.display_hint}.{value.id}@{value.run_id}]}}"
        return value

    def decode(self, marker: str) -> Token:
        """Map a complete string marker back to its token."""
        match = _MARKER_RE.fullmatch(marker)
        if match is None:
            raise MalformedTokenError(marker, "not an encoded token")
        return self._from_match(match)

    def split(self, value: str) -> list[str | Token]:
        """Split *value* into literal fragments and tokens, in order."""
        fragments: list[str | Token] = []
        pos = 0
        for match in _MARKER_RE.finditer(value):
            if match.start() > pos:
                fragments.append(value[pos : match.start()])
            fragments.append(self._from_match(match))
            pos = match.end()
        if pos < len(value):
            fragments.append(value[pos:])
        return fragments

    def _from_match(self, match: re.Match[str]) -> Token:
        marker = match.group(0)
        if match.group("run") != self._run_id:
            raise MalformedTokenError(
                marker,
                f"minted by run {match.group('run')}, current run is {self._run_id}",
            )
        token = self._tokens.get(int(match.group("id")))
        if token is None:
            raise MalformedTokenError(marker, "no token with this id in this run")
        return token

    # ── Number encoding ──────────────────────────────────────────────

    def encode_number(self, value: Any) -> Any:
        """Encode a token as a reserved float. Non-tokens pass through."""
        if isinstance(value, Resolvable):
            value = self.mint(value)
        if isinstance(value, Token):
            self.verify(value)
            bits = (_DOUBLE_MARKER << _DOUBLE_ID_BITS) | value.id
            return struct.unpack("<d", struct.pack("<Q", bits))[0]
        return value

    def decode_number(self, value: Any) -> Token | None:
        """Return the token encoded in *value*, or ``None`` for ordinary numbers."""
        if not isinstance(value, float):
            return None
        bits = struct.unpack("<Q", struct.pack("<d", value))[0]
        if bits >> _DOUBLE_ID_BITS != _DOUBLE_MARKER:
            return None
        return self.token(bits & _DOUBLE_ID_MASK)

    # ── Inspection ───────────────────────────────────────────────────

    def is_unresolved(self, value: Any) -> bool:
        """Whether *value* is, or directly embeds, a token."""
        if isinstance(value, (Token, Resolvable)):
            return True
        if isinstance(value, str):
            return contains_token_marker(value)
        return self.decode_number(value) is not None

    def tokens_in(self, value: Any) -> set[Token]:
        """Collect the tokens embedded anywhere in *value*, without resolving them."""
        found: set[Token] = set()
        self._collect(value, found)
        return found

    def _collect(self, value: Any, found: set[Token]) -> None:
        if isinstance(value, Token):
            found.add(self.verify(value))
        elif isinstance(value, str):
            found.update(f for f in self.split(value) if isinstance(f, Token))
        elif isinstance(value, float):
            token = self.decode_number(value)
            if token is not None:
                found.add(token)
        elif isinstance(value, Mapping):
            for k, v in value.items():
                self._collect(k, found)
                self._collect(v, found)
        elif isinstance(value, list | tuple | set | frozenset):
            for item in value:
                self._collect(item, found)
        elif isinstance(value, Resolvable):
            self._collect(getattr(value, "value", None), found)
