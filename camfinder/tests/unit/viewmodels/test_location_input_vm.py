from __future__ import annotations

from camfinder.domain.entities import Coordinate
from camfinder.viewmodels.location_input_vm import (
    LATITUDE_ERROR_TEXT,
    LONGITUDE_ERROR_TEXT,
    LocationInputVM,
)


def test_validate_raises_flags_and_error_texts() -> None:
    vm = LocationInputVM()
    vm.set_latitude("91")
    vm.set_longitude("-181")

    result = vm.validate()

    assert not result.ok
    assert vm.latitude_error_text == LATITUDE_ERROR_TEXT
    assert vm.longitude_error_text == LONGITUDE_ERROR_TEXT


def test_editing_a_field_clears_only_its_flag() -> None:
    vm = LocationInputVM()
    vm.set_latitude("x")
    vm.set_longitude("y")
    vm.validate()

    vm.set_latitude("45")

    assert vm.latitude_error is False
    assert vm.longitude_error is True
    assert vm.latitude_error_text == ""


def test_fill_shows_coordinate_and_clears_flags() -> None:
    changes = []
    vm = LocationInputVM(on_change=changes.append)
    vm.validate()

    vm.fill(Coordinate(43.615, -116.2023))

    assert (vm.latitude_text, vm.longitude_text) == ("43.615", "-116.2023")
    assert not vm.latitude_error and not vm.longitude_error
    assert len(changes) == 2


def test_none_edit_becomes_empty_text() -> None:
    vm = LocationInputVM()
    vm.set_latitude(None)

    assert vm.latitude_text == ""
    assert vm.validate().latitude_error is True
