import dataclasses

import pytest

from barutil.barmodel import BarLayer, BarMargins, BarMode


def test_layers_ordered_bottom_to_overlay():
    layers = [BarLayer(value) for value in range(3)]
    assert [layer.name for layer in layers] == ["BOTTOM", "TOP", "OVERLAY"]
    assert sorted([BarLayer.OVERLAY, BarLayer.BOTTOM, BarLayer.TOP]) == layers


def test_layer_lookup_by_name_and_value():
    assert BarLayer["TOP"] is BarLayer.TOP
    assert BarLayer(0) is BarLayer.BOTTOM


def test_margins_default_to_zero():
    assert BarMargins() == BarMargins(top=0, right=0, bottom=0, left=0)


def test_margins_replace_keeps_other_sides():
    margins = dataclasses.replace(BarMargins(), left=5)
    assert (margins.top, margins.right, margins.bottom, margins.left) == (0, 0, 0, 5)


def test_mode_equality_and_replace():
    mode = BarMode(BarLayer.BOTTOM, exclusive=True, passthrough=False, visible=True)
    hidden = dataclasses.replace(mode, visible=False)
    assert hidden.layer is BarLayer.BOTTOM
    assert hidden.visible is False
    assert dataclasses.replace(hidden, visible=True) == mode


def test_mode_is_immutable():
    mode = BarMode(BarLayer.TOP, exclusive=False, passthrough=True, visible=True)
    with pytest.raises(dataclasses.FrozenInstanceError):
        mode.visible = False
    assert mode.visible is True
    assert mode == BarMode(BarLayer.TOP, exclusive=False, passthrough=True, visible=True)