from __future__ import annotations

import asyncio
from typing import List, Optional

import pytest

from camfinder.app.navigation import (
    LOCATION_UNAVAILABLE_TEXT,
    NavigationController,
    PERMISSION_REQUESTED_TEXT,
)
from camfinder.domain.entities import (
    Coordinate,
    Unavailable,
    WebcamLinks,
    WebcamLocation,
    WebcamSummary,
)
from camfinder.domain.ports import UseCaseError
from camfinder.domain.screen_state import LocationInput, WebcamDetail, WebcamList
from camfinder.usecases.acquire_coordinate import PERMISSION_REQUESTED


def _webcam(webcam_id: int, title: Optional[str] = None) -> WebcamSummary:
    return WebcamSummary(
        id=webcam_id,
        title=title or f"Cam {webcam_id}",
        location=WebcamLocation(city="Boise", country="United States"),
        links=WebcamLinks(
            viewer_url=f"https://www.windy.com/webcams/{webcam_id}",
            provider_url=f"https://provider.example/{webcam_id}",
        ),
    )


class _Loader:
    """Returns queued catalogs (or raises queued errors), one per call."""

    def __init__(self, *results) -> None:
        self.results = list(results)
        self.calls: List[Coordinate] = []

    async def __call__(self, coordinate: Coordinate):
        self.calls.append(coordinate)
        if not self.results:
            raise UseCaseError("CATALOG_LOAD_FAILED", "Loader called again")
        result = self.results.pop(0)
        if isinstance(result, BaseException):
            raise result
        return result


class _GatedLoader:
    """Each call waits until the test resolves its future."""

    def __init__(self) -> None:
        self.pending: List[asyncio.Future] = []

    async def __call__(self, coordinate: Coordinate):
        future = asyncio.get_running_loop().create_future()
        self.pending.append(future)
        return await future


class _Acquire:
    def __init__(self, outcome, reason: Optional[str] = None) -> None:
        self.outcome = outcome
        self.reason = reason
        self.calls = 0
        self.last_reason: Optional[str] = None

    async def __call__(self):
        self.calls += 1
        self.last_reason = self.reason
        return self.outcome


class _Opener:
    def __init__(self, error: Optional[Exception] = None) -> None:
        self.opened: List[str] = []
        self.error = error

    def open(self, url: str) -> None:
        if self.error:
            raise self.error
        self.opened.append(url)


def _controller(loader=None, acquire=None, opener=None):
    notices: List[str] = []
    controller = NavigationController(
        acquire=acquire or _Acquire(Unavailable),
        load=loader or _Loader(),
        url_opener=opener,
        on_notice=notices.append,
    )
    return controller, notices


def _in_list_state(catalog):
    controller, notices = _controller(_Loader(catalog))
    assert asyncio.run(controller.submit_coordinate("43.5", "-116.0")) is True
    return controller, notices


def test_initial_state_is_location_input() -> None:
    controller, _ = _controller()

    assert controller.state == LocationInput()
    assert controller.busy is False


def test_submit_valid_coordinate_enters_list_in_response_order() -> None:
    catalog = (_webcam(3), _webcam(1), _webcam(2))
    loader = _Loader(catalog)
    controller, notices = _controller(loader)

    entered = asyncio.run(controller.submit_coordinate("43.5", "-116.0"))

    assert entered is True
    assert loader.calls == [Coordinate(43.5, -116.0)]
    assert isinstance(controller.state, WebcamList)
    assert [cam.id for cam in controller.state.catalog] == [3, 1, 2]
    assert notices == []
    assert controller.busy is False


def test_out_of_range_latitude_sets_flag_and_skips_load() -> None:
    loader = _Loader((_webcam(1),))
    controller, _ = _controller(loader)

    entered = asyncio.run(controller.submit_coordinate("91.0", "0.0"))

    assert entered is False
    assert controller.input_vm.latitude_error is True
    assert controller.input_vm.longitude_error is False
    assert loader.calls == []
    assert controller.state == LocationInput()


def test_both_error_flags_can_be_set_together() -> None:
    loader = _Loader()
    controller, _ = _controller(loader)

    asyncio.run(controller.submit_coordinate("north", "181"))

    assert controller.input_vm.latitude_error is True
    assert controller.input_vm.longitude_error is True
    assert loader.calls == []


@pytest.mark.parametrize(
    "latitude, longitude",
    [("90", "180"), ("-90", "-180"), ("90.0", "-180.0")],
)
def test_boundary_coordinates_are_accepted(latitude: str, longitude: str) -> None:
    loader = _Loader(())
    controller, _ = _controller(loader)

    assert asyncio.run(controller.submit_coordinate(latitude, longitude)) is True
    assert loader.calls == [Coordinate(float(latitude), float(longitude))]


def test_empty_catalog_is_a_list_not_an_error() -> None:
    controller, notices = _controller(_Loader(()))

    assert asyncio.run(controller.submit_coordinate("0", "0")) is True
    assert controller.state == WebcamList(catalog=())
    assert notices == []


def test_load_failure_stays_on_input_and_reports_notice() -> None:
    error = UseCaseError("REQUEST_TIMEOUT", "Request timed out. Check connection.")
    controller, notices = _controller(_Loader(error))

    assert asyncio.run(controller.submit_coordinate("10", "10")) is False
    assert controller.state == LocationInput()
    assert notices == ["Request timed out. Check connection."]


def test_current_location_with_permission_denied_shows_notice_without_load() -> None:
    loader = _Loader((_webcam(1),))
    acquire = _Acquire(Unavailable, reason=PERMISSION_REQUESTED)
    controller, notices = _controller(loader, acquire)

    assert asyncio.run(controller.use_current_location()) is False
    assert controller.state == LocationInput()
    assert notices == [PERMISSION_REQUESTED_TEXT]
    assert loader.calls == []


def test_current_location_unavailable_shows_generic_notice() -> None:
    controller, notices = _controller(_Loader(), _Acquire(Unavailable, reason="no_fix"))

    asyncio.run(controller.use_current_location())

    assert notices == [LOCATION_UNAVAILABLE_TEXT]


def test_current_location_fills_form_and_loads_catalog() -> None:
    loader = _Loader((_webcam(5),))
    controller, _ = _controller(loader, _Acquire(Coordinate(43.6, -116.2)))

    assert asyncio.run(controller.use_current_location()) is True
    assert controller.input_vm.latitude_text == "43.6"
    assert controller.input_vm.longitude_text == "-116.2"
    assert loader.calls == [Coordinate(43.6, -116.2)]
    assert isinstance(controller.state, WebcamList)


def test_select_present_id_enters_detail_with_unchanged_catalog() -> None:
    catalog = (_webcam(1), _webcam(2), _webcam(3))
    controller, _ = _in_list_state(catalog)
    list_catalog = controller.state.catalog

    assert controller.select_webcam(2) is True

    state = controller.state
    assert isinstance(state, WebcamDetail)
    assert state.selected == catalog[1]
    assert state.catalog == list_catalog


def test_select_uses_first_match_for_duplicate_ids() -> None:
    first = _webcam(7, "First")
    catalog = (_webcam(1), first, _webcam(7, "Second"))
    controller, _ = _in_list_state(catalog)

    controller.select_webcam(7)

    assert controller.state.selected is first


def test_select_absent_id_is_a_noop() -> None:
    controller, notices = _in_list_state((_webcam(1),))
    before = controller.state

    assert controller.select_webcam(99) is False
    assert controller.state is before
    assert notices == []


def test_back_from_detail_restores_list_without_refetch() -> None:
    catalog = (_webcam(1), _webcam(2))
    loader = _Loader(catalog)
    controller, notices = _controller(loader)
    asyncio.run(controller.submit_coordinate("1", "2"))
    controller.select_webcam(1)

    assert controller.go_back() is True

    assert controller.state == WebcamList(catalog=catalog)
    assert len(loader.calls) == 1
    assert notices == []


def test_back_from_list_discards_catalog() -> None:
    controller, _ = _in_list_state((_webcam(1),))

    assert controller.go_back() is True
    assert controller.state == LocationInput()


def test_back_on_location_input_is_left_to_host() -> None:
    controller, _ = _controller()

    assert controller.go_back() is False
    assert controller.state == LocationInput()


def test_newer_submission_supersedes_pending_one() -> None:
    async def scenario():
        loader = _GatedLoader()
        controller, _ = _controller(loader)
        first = asyncio.create_task(controller.submit_coordinate("10", "10"))
        await asyncio.sleep(0)
        second = asyncio.create_task(controller.submit_coordinate("20", "20"))
        await asyncio.sleep(0)
        assert controller.busy is True

        loader.pending[1].set_result((_webcam(2),))
        assert await second is True
        loader.pending[0].set_result((_webcam(1),))
        assert await first is False
        return controller

    controller = asyncio.run(scenario())

    assert [cam.id for cam in controller.state.catalog] == [2]
    assert controller.busy is False


def test_stale_completion_after_back_is_dropped() -> None:
    async def scenario():
        loader = _GatedLoader()
        controller, notices = _controller(loader)
        stale = asyncio.create_task(controller.submit_coordinate("10", "10"))
        await asyncio.sleep(0)
        fresh = asyncio.create_task(controller.submit_coordinate("20", "20"))
        await asyncio.sleep(0)
        loader.pending[1].set_result((_webcam(2),))
        await fresh
        controller.go_back()

        loader.pending[0].set_exception(UseCaseError("SERVER_ERROR", "late failure"))
        assert await stale is False
        return controller, notices

    controller, notices = asyncio.run(scenario())

    assert controller.state == LocationInput()
    assert notices == []


def test_intents_outside_their_screen_are_ignored() -> None:
    controller, _ = _in_list_state((_webcam(1),))
    before = controller.state

    assert asyncio.run(controller.submit_coordinate("5", "5")) is False
    assert asyncio.run(controller.use_current_location()) is False
    assert controller.state is before

    fresh, _ = _controller()
    assert fresh.select_webcam(1) is False


def test_subscribers_see_every_transition_until_unsubscribed() -> None:
    seen = []
    controller, _ = _controller(_Loader((_webcam(1),)))
    unsubscribe = controller.subscribe(seen.append)

    asyncio.run(controller.submit_coordinate("1", "1"))
    controller.select_webcam(1)
    unsubscribe()
    controller.go_back()

    assert [type(state).__name__ for state in seen] == ["WebcamList", "WebcamDetail"]


def test_open_url_delegates_to_opener() -> None:
    opener = _Opener()
    controller, notices = _controller(opener=opener)

    controller.open_url("https://www.windy.com/webcams/1")

    assert opener.opened == ["https://www.windy.com/webcams/1"]
    assert notices == []


def test_open_url_failure_becomes_notice() -> None:
    controller, notices = _controller(opener=_Opener(ValueError("No link available for this webcam.")))

    controller.open_url("")

    assert notices == ["No link available for this webcam."]


def test_busy_hook_spans_location_and_catalog_load() -> None:
    changes: List[bool] = []
    controller = NavigationController(
        acquire=_Acquire(Coordinate(1.0, 2.0)),
        load=_Loader((_webcam(1),)),
        on_busy=changes.append,
    )

    asyncio.run(controller.use_current_location())

    assert changes == [True, False]
    assert controller.busy is False


def test_busy_hook_is_visible_while_load_is_pending() -> None:
    async def scenario():
        loader = _GatedLoader()
        seen: List[bool] = []
        controller = NavigationController(acquire=_Acquire(Unavailable), load=loader)
        controller.on_busy = lambda busy: seen.append(controller.busy)
        task = asyncio.create_task(controller.submit_coordinate("10", "10"))
        await asyncio.sleep(0)
        assert seen == [True]
        loader.pending[0].set_exception(UseCaseError("SERVER_ERROR", "Webcam service error, try again."))
        await task
        return seen

    assert asyncio.run(scenario()) == [True, False]
