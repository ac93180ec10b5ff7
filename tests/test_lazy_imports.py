"""Tests for muxr.__init__ — lazy imports cover all public names."""

import pytest

import muxr
from muxr.routing.router import Router


@pytest.mark.parametrize("name", muxr.__all__)
def test_all_names_resolve(name: str) -> None:
    """Every name in __all__ must resolve via __getattr__ without error."""
    obj = getattr(muxr, name)
    assert obj is not None, f"muxr.{name} resolved to None"


def test_top_level_is_same_object() -> None:
    assert muxr.Router is Router


def test_unknown_name_raises_attribute_error() -> None:
    with pytest.raises(AttributeError, match="no attribute"):
        muxr.__getattr__("ThisDoesNotExist")
