"""Tree configuration."""

from __future__ import annotations

from dataclasses import dataclass

from .constants import DEFAULT_INDENT


@dataclass(frozen=True, slots=True)
class TreeConfig:
    """Options fixed for the lifetime of a `Tree`.

    Copies of a tree inherit the source's config.
    """

    # Per-depth indentation used by `Tree.dump` and `Tree.to_text`.
    indent: str = DEFAULT_INDENT

    # Validate attribute values passed through `set_attribute`/`update_attributes`.
    validate_values: bool = True

    # Run `Tree.check_invariants()` after every mutation. Slow; meant for fuzzing.
    check_invariants: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.indent, str):
            msg = f"indent must be a string, got {type(self.indent).__name__}"
            raise TypeError(msg)


DEFAULT_CONFIG = TreeConfig()
