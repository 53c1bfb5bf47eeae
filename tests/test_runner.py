"""
Tests for the render loop.

Run with: pytest tests/test_runner.py -v
"""

import threading

import pytest
from pydantic import BaseModel

from ledclock.apps.base import AppMetadata, AppState, BaseApp, RenderResult
from ledclock.apps.runner import AppRunner
from ledclock.display.graphics import Colors, new_frame


class DummyConfig(BaseModel):
    enabled: bool = True


class DummyApp(BaseApp[DummyConfig]):
    def __init__(
        self,
        name,
        config=None,
        fail_render=False,
        fail_activate=False,
        brightness=None,
        next_render_in=0.5,
    ):
        super().__init__(config or DummyConfig())
        self.next_render_in = next_render_in
        self.rendered = threading.Event()
        self._name = name
        self.fail_render = fail_render
        self.fail_activate = fail_activate
        self.brightness = brightness
        self.renders = 0

    @property
    def metadata(self):
        return AppMetadata(name=self._name, display_name=self._name.title(), description="")

    def _on_activate(self):
        if self.fail_activate:
            raise RuntimeError("boom")

    def render(self, width, height):
        self.renders += 1
        self.rendered.set()
        if self.fail_render:
            raise RuntimeError("render failed")
        return RenderResult(
            image=new_frame(width, height, Colors.RED),
            next_render_in=self.next_render_in,
            brightness=self.brightness,
        )


class FakeDisplay:
    width = 8
    height = 4

    def __init__(self):
        self.brightness = 50
        self.frames = []
        self.brightness_calls = []

    def render_image(self, image):
        self.frames.append(image)

    def set_brightness(self, brightness):
        self.brightness = brightness
        self.brightness_calls.append(brightness)


@pytest.fixture
def display():
    return FakeDisplay()


@pytest.fixture
def runner(display):
    return AppRunner(display)


class TestActivation:
    def test_set_active_app(self, runner):
        a, b = DummyApp("a"), DummyApp("b")
        runner.register_app(a)
        runner.register_app(b)

        assert runner.set_active_app("a")
        assert a.state == AppState.ACTIVE
        assert runner.set_active_app("b")
        assert a.state == AppState.INACTIVE
        assert b.state == AppState.ACTIVE
        assert runner.active_app is b

    def test_unknown_app(self, runner):
        assert runner.set_active_app("nope") is False
        assert runner.active_app is None

    def test_activation_failure(self, runner):
        app = DummyApp("a", fail_activate=True)
        runner.register_app(app)
        assert runner.set_active_app("a") is False
        assert app.state == AppState.ERROR
        assert app.last_error == "boom"
        assert runner.active_app_name is None

    def test_next_app_skips_disabled(self, runner):
        runner.register_app(DummyApp("a"))
        runner.register_app(DummyApp("b", config=DummyConfig(enabled=False)))
        runner.register_app(DummyApp("c"))

        assert runner.get_enabled_apps() == ["a", "c"]
        assert runner.next_app() == "a"
        assert runner.next_app() == "c"
        assert runner.next_app() == "a"

    def test_next_app_without_apps(self, runner):
        assert runner.next_app() is None


class TestRunOnce:
    def test_renders_active_app(self, runner, display):
        runner.register_app(DummyApp("a"))
        runner.set_active_app("a")

        assert runner.run_once() == 0.5
        assert len(display.frames) == 1
        assert display.frames[0].size == (8, 4)

    def test_idle_without_app(self, runner, display):
        assert runner.run_once() == AppRunner.ERROR_RETRY_DELAY
        assert display.frames == []

    def test_brightness_applied_once(self, runner, display):
        runner.register_app(DummyApp("a", brightness=70))
        runner.set_active_app("a")
        runner.run_once()
        runner.run_once()
        assert display.brightness_calls == [70]

    def test_default_brightness_restored_on_switch(self, runner, display):
        runner.register_app(DummyApp("letter", brightness=100))
        runner.register_app(DummyApp("analog"))
        runner.set_active_app("letter")
        runner.run_once()

        runner.set_active_app("analog")
        runner.run_once()
        runner.run_once()

        assert display.brightness_calls == [100, 50]
        assert display.brightness == 50

    def test_no_brightness_request(self, runner, display):
        runner.register_app(DummyApp("a"))
        runner.set_active_app("a")
        runner.run_once()
        assert display.brightness_calls == []

    def test_render_errors_switch_app(self, runner, display):
        broken = DummyApp("broken", fail_render=True)
        runner.register_app(broken)
        runner.register_app(DummyApp("ok"))
        runner.set_active_app("broken")

        for _ in range(AppRunner.MAX_RENDER_ERRORS - 1):
            assert runner.run_once() == AppRunner.ERROR_RETRY_DELAY
            assert runner.active_app_name == "broken"

        runner.run_once()
        assert runner.active_app_name == "ok"
        assert display.frames == []
        runner.run_once()
        assert len(display.frames) == 1


class TestCallSoon:
    def test_runs_before_render(self, runner):
        app = DummyApp("a")
        runner.register_app(app)
        runner.set_active_app("a")

        seen = []
        runner.call_soon(lambda: seen.append(app.renders))
        runner.run_once()

        assert seen == [0]
        assert app.renders == 1

    def test_runs_once(self, runner):
        calls = []
        runner.call_soon(lambda: calls.append(1))
        runner.run_once()
        runner.run_once()
        assert calls == [1]

    def test_failing_callback_does_not_stop_render(self, runner, display):
        runner.register_app(DummyApp("a"))
        runner.set_active_app("a")

        def broken():
            raise RuntimeError("bad callback")

        calls = []
        runner.call_soon(broken)
        runner.call_soon(lambda: calls.append(1))
        runner.run_once()

        assert calls == [1]
        assert len(display.frames) == 1

    def test_wakes_waiting_loop(self, runner):
        app = DummyApp("a", next_render_in=60)
        runner.register_app(app)
        runner.set_active_app("a")

        loop_threads = []
        thread = threading.Thread(target=runner.run)
        thread.start()
        try:
            assert app.rendered.wait(2)
            app.rendered.clear()
            runner.call_soon(lambda: loop_threads.append(threading.current_thread()))
            assert app.rendered.wait(2)
        finally:
            runner.stop()
            thread.join(2)

        assert loop_threads == [thread]
        assert not thread.is_alive()


class TestRun:
    def test_stop_before_run_exits_immediately(self, runner):
        app = DummyApp("a")
        runner.register_app(app)
        runner.set_active_app("a")

        runner.stop()
        runner.run()
        assert app.renders == 0
        assert app.state == AppState.INACTIVE

    def test_stop_from_another_thread(self, runner, display):
        runner.register_app(DummyApp("a"))
        runner.set_active_app("a")

        timer = threading.Timer(0.2, runner.stop)
        timer.start()
        runner.run()
        timer.join()

        assert len(display.frames) >= 1
