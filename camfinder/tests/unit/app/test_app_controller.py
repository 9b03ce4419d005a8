from __future__ import annotations

import asyncio

import pytest

from camfinder.adapters.location_ip import IpLocationAdapter, PermissionGate
from camfinder.adapters.location_mock import LocationMock
from camfinder.adapters.url_opener import BrowserUrlOpener
from camfinder.adapters.windy_rest import WindyWebcamAdapter
from camfinder.app.controller import AppController
from camfinder.domain.entities import LocationFix
from camfinder.viewmodels.settings_vm import SettingsVM


def _settings(**values) -> SettingsVM:
    vm = SettingsVM()
    vm.apply_dict(values)
    return vm


def test_not_ready_without_api_key() -> None:
    controller = AppController(_settings())

    assert controller.ensure_ready() is False
    with pytest.raises(RuntimeError):
        controller.build_navigation()
    with pytest.raises(RuntimeError):
        controller.session_location()


def test_ensure_ready_builds_adapters_from_settings() -> None:
    controller = AppController(
        _settings(
            api_key="abc",
            api_base_url="https://webcams.example/v3/",
            request_timeout_s=3,
            location_timeout_s=4,
        )
    )

    assert controller.ensure_ready() is True

    assert isinstance(controller.catalog_adapter, WindyWebcamAdapter)
    assert controller.catalog_adapter.base_url == "https://webcams.example/v3"
    assert controller.catalog_adapter.cfg.request_timeout_s == 3
    assert isinstance(controller.location_adapter, IpLocationAdapter)
    assert controller.build_navigation()._acquire.timeout_s == 4
    controller.close()


def test_each_session_gets_its_own_gate_over_shared_transport() -> None:
    controller = AppController(_settings(api_key="abc"))
    shared = None
    try:
        first = controller.session_location()
        second = controller.session_location()
        shared = controller.location_adapter

        assert isinstance(first.gate, PermissionGate)
        assert first.gate is not second.gate
        assert first.gate is not shared.gate
        assert first.session is second.session is shared.session

        first.gate.resolve(True)
        assert first.permission_status().granted is True
        assert second.permission_status().granted is False
    finally:
        controller.close()


def test_each_navigation_gets_its_own_location_use_case() -> None:
    controller = AppController(_settings(api_key="abc"), location_port=LocationMock())

    one = controller.build_navigation()
    two = controller.build_navigation()

    assert one._acquire is not two._acquire
    assert one._load is two._load


def test_location_override_is_shared_unchanged() -> None:
    mock = LocationMock()
    controller = AppController(_settings(api_key="abc"), location_port=mock)

    assert controller.session_location() is mock
    assert not hasattr(controller.session_location(), "gate")


def test_build_navigation_picks_url_opener() -> None:
    class _Opener:
        def open(self, url: str) -> None:
            pass

    default_opener = _Opener()
    session_opener = _Opener()
    controller = AppController(_settings(api_key="abc"), location_port=LocationMock(), url_opener=default_opener)

    assert controller.build_navigation().url_opener is default_opener
    assert controller.build_navigation(url_opener=session_opener).url_opener is session_opener
    bare = AppController(_settings(api_key="abc"), location_port=LocationMock())
    assert isinstance(bare.build_navigation().url_opener, BrowserUrlOpener)


def test_sessions_keep_working_when_more_sessions_open() -> None:
    mock = LocationMock(fix=LocationFix(43.6, -116.2))
    controller = AppController(_settings(api_key="abc"), location_port=mock)

    async def _load(coordinate):
        return ()

    controller.ensure_ready()
    controller.uc_load = _load
    first = controller.build_navigation()
    controller.build_navigation()

    assert asyncio.run(first.use_current_location()) is True
