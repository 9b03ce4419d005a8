"""NiceGUI entrypoint for the webcam browser."""

from __future__ import annotations

import argparse
import logging
from typing import Any, Dict

from nicegui import app, ui

from camfinder.utils.logging import apply_debug_preference, configure_root
from camfinder.viewmodels.settings_vm import SettingsVM
from camfinder.web_ui.runtime import BrowserSession, WebRuntime

LOGGER = logging.getLogger(__name__)


class TabUrlOpener:
    """Opens links in a new tab of the browser that triggered the click."""

    def open(self, url: str) -> None:
        target = (url or "").strip()
        if not target:
            raise ValueError("No link available for this webcam.")
        ui.navigate.to(target, new_tab=True)


def _notify(message: str) -> None:
    """Render notices as short NiceGUI toasts."""
    ui.notify(message, type="warning", position="bottom")


def _build_ui(runtime: WebRuntime) -> None:
    """Register the NiceGUI page for the runtime."""

    @ui.page("/")
    async def index() -> None:
        if not runtime.ensure_adapter():
            ui.label(runtime.status_message).classes("text-negative q-pa-md")
            return

        current: Dict[str, Any] = {"dto": {"screen": "input"}, "built": False}

        def refresh() -> None:
            if current["built"]:
                render_screen.refresh()

        def on_render(dto: Dict) -> None:
            current["dto"] = dto
            refresh()

        with ui.dialog() as permission_dialog, ui.card():
            ui.label("Allow this app to use your approximate location?")
            ui.label("The position is derived from your public IP address.").classes("text-caption")

            def answer(granted: bool) -> None:
                permission_dialog.close()
                runtime.resolve_permission(session, granted)

            with ui.row():
                ui.button("Allow", on_click=lambda: answer(True), color="primary")
                ui.button("Deny", on_click=lambda: answer(False))

        session: BrowserSession = runtime.open_session(
            on_notice=_notify,
            on_render=on_render,
            on_busy=lambda _: refresh(),
            url_opener=TabUrlOpener(),
            on_permission_prompt=permission_dialog.open,
        )
        navigation = session.navigation
        form = session.input_vm

        async def use_current_location() -> None:
            await navigation.use_current_location()
            refresh()

        async def submit() -> None:
            await navigation.submit_coordinate()
            refresh()

        def render_input() -> None:
            with ui.column().classes("w-full max-w-md q-pa-md q-gutter-md"):
                ui.button(
                    "Use Current Location",
                    on_click=use_current_location,
                ).classes("w-full").props("loading" if navigation.busy else "")
                ui.input(
                    "Latitude - e.g. 43.5",
                    value=form.latitude_text,
                    on_change=lambda e: form.set_latitude(e.value),
                ).props("outlined" + (" error" if form.latitude_error else "")).classes("w-full")
                if form.latitude_error:
                    ui.label(form.latitude_error_text).classes("text-negative")
                ui.input(
                    "Longitude - e.g. 116",
                    value=form.longitude_text,
                    on_change=lambda e: form.set_longitude(e.value),
                ).props("outlined" + (" error" if form.longitude_error else "")).classes("w-full")
                if form.longitude_error:
                    ui.label(form.longitude_error_text).classes("text-negative")
                ui.button("Fetch WebCams", on_click=submit, color="primary").classes("w-full")

        def render_list(dto: Dict) -> None:
            with ui.column().classes("w-full q-pa-md"):
                ui.label("Available WebCams").classes("text-h5")
                if dto.get("empty_text"):
                    ui.label(dto["empty_text"]).classes("text-body1")
                for webcam_id, title, id_label in dto.get("rows", []):
                    with ui.row().classes("w-full justify-between cursor-pointer q-py-sm").on(
                        "click", lambda _, w=webcam_id: navigation.select_webcam(w)
                    ):
                        ui.label(title)
                        ui.label(id_label).classes("text-caption")
                ui.button("New Search", on_click=navigation.go_back)

        def render_detail(dto: Dict) -> None:
            with ui.column().classes("w-full q-pa-md q-gutter-sm"):
                ui.label("WebCam Details").classes("text-h5")
                ui.label(f"Title: {dto['title']}")
                ui.label(f"Location: {dto['location']}")
                ui.button(
                    "Windy URL",
                    on_click=lambda: navigation.open_url(dto["viewer_url"]),
                ).props("flat")
                ui.button(
                    "Provider URL",
                    on_click=lambda: navigation.open_url(dto["provider_url"]),
                ).props("flat")
                ui.button("Back to List", on_click=navigation.go_back)

        @ui.refreshable
        def render_screen() -> None:
            dto = current["dto"]
            screen = dto.get("screen")
            if screen == "list":
                render_list(dto)
            elif screen == "detail":
                render_detail(dto)
            else:
                render_input()

        render_screen()
        current["built"] = True


def _parse_args() -> argparse.Namespace:
    """Parse CLI args for web runtime startup."""
    parser = argparse.ArgumentParser(description="Browse webcams near a location.")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8080)
    parser.add_argument("--reload", action="store_true")
    parser.add_argument("--api-key", default=None, help="Windy webcams API key")
    parser.add_argument("--api-base-url", default=None)
    parser.add_argument("--mock-location", action="store_true", help="Report a fixed location")
    parser.add_argument("--debug", action="store_true")
    parser.add_argument("--smoke-test", action="store_true")
    return parser.parse_args()


def main() -> None:
    """CLI entrypoint for the NiceGUI runtime."""
    args = _parse_args()
    configure_root()

    settings_vm = SettingsVM()
    settings_vm.apply_env()
    settings_vm.apply_dict(
        {
            "api_key": args.api_key,
            "api_base_url": args.api_base_url,
            "debug_logging": args.debug or settings_vm.debug_logging,
        }
    )
    apply_debug_preference(settings_vm.debug_logging)

    runtime = WebRuntime.with_mock_location(settings_vm) if args.mock_location else WebRuntime(settings_vm)
    if args.smoke_test:
        ready = runtime.ensure_adapter()
        print("web-smoke-ok", ready)
        return
    if not runtime.ensure_adapter():
        LOGGER.error(runtime.status_message)

    _build_ui(runtime)
    app.on_shutdown(runtime.close)
    ui.run(
        host=args.host,
        port=args.port,
        title="Webcam Finder",
        reload=args.reload,
        show=False,
    )


if __name__ == "__main__":
    main()
