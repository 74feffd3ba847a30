"""Tests for token minting, lookup and string/number encoding."""

from __future__ import annotations

import math

import pytest

from stack_synth.errors import MalformedTokenError
from stack_synth.tokens import Constant, Lazy, Token, TokenRegistry, contains_token_marker


class TestMint:
    def test_ids_are_unique_and_increasing(self, registry: TokenRegistry) -> None:
        a = registry.mint(Constant(1))
        b = registry.mint(Constant(1))
        assert a.id < b.id
        assert a is not b
        assert len(registry) == 2

    def test_tokens_compare_by_identity(self, registry: TokenRegistry) -> None:
        producer = Constant("x")
        assert registry.mint(producer) != registry.mint(producer)

    def test_display_hint_from_producer(self, registry: TokenRegistry) -> None:
        token = registry.mint(Lazy(lambda: 1, display_hint="Bucket.Arn"))
        assert token.display_hint == "BucketArn"
        assert token.label == f"BucketArn.{token.id}"

    def test_default_run_id_is_eight_hex_chars(self) -> None:
        run_id = TokenRegistry().run_id
        assert len(run_id) == 8
        int(run_id, 16)


class TestStringEncoding:
    def test_encode_lookup_round_trip(self, registry: TokenRegistry) -> None:
        producer = Constant("value")
        marker = registry.encode(producer)
        assert isinstance(marker, str)
        assert registry.lookup(marker) is producer

    def test_marker_format(self, registry: TokenRegistry) -> None:
        marker = registry.encode(Constant("v", display_hint="Name"))
        token = registry.decode(marker)
        assert marker == f"${{Token[Name.{token.id}@0badcafe]}}"
        assert contains_token_marker(marker)

    def test_encode_passes_through_literals(self, registry: TokenRegistry) -> None:
        assert registry.encode("plain") == "plain"
        assert registry.encode(42) == 42
        assert registry.encode(None) is None

    def test_encode_existing_token(self, registry: TokenRegistry) -> None:
        token = registry.mint(Constant(1))
        assert registry.decode(registry.encode(token)) is token

    def test_lookup_by_id(self, registry: TokenRegistry) -> None:
        producer = Constant(1)
        token = registry.mint(producer)
        assert registry.lookup(token.id) is producer

    def test_split_keeps_order(self, registry: TokenRegistry) -> None:
        a = registry.mint(Constant("a"))
        b = registry.mint(Constant("b"))
        value = f"pre-{registry.encode(a)}-mid-{registry.encode(b)}"
        assert registry.split(value) == ["pre-", a, "-mid-", b]

    def test_split_plain_string(self, registry: TokenRegistry) -> None:
        assert registry.split("no tokens here") == ["no tokens here"]


class TestMalformed:
    def test_marker_from_another_run(self, registry: TokenRegistry) -> None:
        other = TokenRegistry(run_id="feedface")
        marker = other.encode(Constant(1))
        with pytest.raises(MalformedTokenError, match="feedface"):
            registry.decode(marker)

    def test_unknown_id(self, registry: TokenRegistry) -> None:
        with pytest.raises(MalformedTokenError, match="no token"):
            registry.decode("${Token[X.999@0badcafe]}")

    def test_not_a_marker(self, registry: TokenRegistry) -> None:
        with pytest.raises(MalformedTokenError, match="not an encoded token"):
            registry.decode("hello")

    def test_verify_rejects_foreign_token(self, registry: TokenRegistry) -> None:
        foreign = Token(id=1, run_id="0badcafe", producer=Constant(1))
        with pytest.raises(MalformedTokenError):
            registry.verify(foreign)


class TestNumberEncoding:
    def test_round_trip(self, registry: TokenRegistry) -> None:
        token = registry.mint(Constant(30))
        encoded = registry.encode_number(token)
        assert isinstance(encoded, float)
        assert math.isfinite(encoded)
        assert registry.decode_number(encoded) is token

    def test_ordinary_numbers_are_not_tokens(self, registry: TokenRegistry) -> None:
        assert registry.decode_number(1.5) is None
        assert registry.decode_number(-2.0) is None
        assert registry.decode_number(7) is None


class TestInspection:
    def test_is_unresolved(self, registry: TokenRegistry) -> None:
        marker = registry.encode(Constant(1))
        assert registry.is_unresolved(marker)
        assert registry.is_unresolved(f"x{marker}y")
        assert registry.is_unresolved(registry.encode_number(Constant(1)))
        assert registry.is_unresolved(Constant(1))
        assert not registry.is_unresolved("plain")
        assert not registry.is_unresolved(3.0)

    def test_tokens_in_nested_structures(self, registry: TokenRegistry) -> None:
        a = registry.mint(Constant("a"))
        b = registry.mint(Constant("b"))
        value = {"k": [f"x{registry.encode(a)}"], registry.encode(b): "v"}
        assert registry.tokens_in(value) == {a, b}
