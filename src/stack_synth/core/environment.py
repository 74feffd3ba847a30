"""Resource environments (account, region) and same-environment checks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from stack_synth.tokens.compare import TokenComparison, compare_strings

if TYPE_CHECKING:
    from stack_synth.tokens.context import ResolveContext
    from stack_synth.tokens.registry import TokenRegistry

UNKNOWN_ACCOUNT = "unknown-account"
UNKNOWN_REGION = "unknown-region"


@dataclass(frozen=True, slots=True)
class ResourceEnvironment:
    """The account and region a resource lives in.

    Either field may be an encoded token (e.g. ``AWS::AccountId`` for an
    environment-agnostic stack), so compare environments with
    :func:`same_environment`, never with ``==``.
    """

    account: str
    region: str

    def describe(self, registry: TokenRegistry) -> str:
        """Render as ``aws://<account>/<region>``, with placeholders for tokens."""
        account = UNKNOWN_ACCOUNT if registry.is_unresolved(self.account) else self.account
        region = UNKNOWN_REGION if registry.is_unresolved(self.region) else self.region
        return f"aws://{account}/{region}"


def same_environment(
    a: ResourceEnvironment, b: ResourceEnvironment, context: ResolveContext
) -> bool:
    """Whether *a* and *b* are known to be the same deployment environment."""
    return (
        compare_strings(a.account, b.account, context) is TokenComparison.SAME
        and compare_strings(a.region, b.region, context) is TokenComparison.SAME
    )
