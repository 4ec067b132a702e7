from __future__ import annotations
import typer, asyncio, logging
from rich import print
from rich.console import Console
from rich.logging import RichHandler
from typing import Optional
from .config import load_config, Settings
from .errors import InitializationError, DeviceError
from .runtime.events import BlinkEvent, ws_broadcast
from .runtime.scheduler import AsyncioScheduler, ManualScheduler
from .runtime.session import SessionController

app = typer.Typer(add_completion=False, help="BlinkKit CLI (bk)")


def _setup_logging(level: str):
    logging.basicConfig(level=level.upper(), format="%(message)s", datefmt="[%X]",
                        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)])


def _settings(config: Optional[str], ear_threshold, consecutive_frames, debounce_ms, disabled,
              camera: Optional[str]=None, fps: Optional[float]=None) -> Settings:
    cam = int(camera) if camera is not None and camera.isdigit() else camera
    return load_config(config).override(
        detector={"ear_threshold": ear_threshold, "consecutive_frames": consecutive_frames,
                  "debounce_ms": debounce_ms, "enabled": False if disabled else None},
        capture={"camera": cam, "fps": fps},
    )


@app.command()
def run(config: Optional[str] = typer.Option(None, help="YAML settings file"),
        camera: Optional[str] = typer.Option(None, help="camera index or video path"),
        fps: Optional[float] = None,
        ear_threshold: Optional[float] = None,
        consecutive_frames: Optional[int] = None,
        debounce_ms: Optional[int] = None,
        disabled: bool = typer.Option(False, help="track eyes but never count blinks"),
        ws: bool = typer.Option(False, help="broadcast blink events over WebSocket"),
        port: int = 8765,
        click: bool = typer.Option(False, help="demo action: one blink = one mouse click"),
        log_level: str = "INFO"):
    """
    Live session: count blinks from the camera and print one JSON line per blink.
    """
    _setup_logging(log_level)
    settings = _settings(config, ear_threshold, consecutive_frames, debounce_ms, disabled, camera, fps)
    from .eye.landmarks import FaceLandmarks
    from .io.camera import CameraSource

    queue: "asyncio.Queue[str]" = asyncio.Queue()
    action = None
    if click:
        from .demos.clicker import BlinkClicker
        action = BlinkClicker()

    async def main():
        cap = settings.capture
        session = SessionController(FaceLandmarks(), CameraSource(cap.camera, cap.width, cap.height),
                                    AsyncioScheduler(cap.fps), settings.detector)

        def on_blink(count: int):
            line = BlinkEvent(count=count, avg_ear=session.avg_ear).model_dump_json()
            print(line)
            if ws: queue.put_nowait(line)
            if action: action(count)

        session.emitter.callback = on_blink
        try:
            session.start()
        except (InitializationError, DeviceError) as e:
            print(f"[red]{type(e).__name__}[/red]: {e}")
            raise typer.Exit(1)
        bcast = asyncio.create_task(ws_broadcast(queue, "0.0.0.0", port)) if ws else None
        try:
            # a video file ends the session on its own; a camera runs until Ctrl+C
            while session.is_running:
                await asyncio.sleep(0.1)
        finally:
            if bcast: bcast.cancel()
            session.stop()
            print("[green]Stopped[/green]", session.diagnostics().model_dump_json())

    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass


@app.command()
def replay(trace: str = typer.Argument(..., help="YAML/JSON list of {ts, ear} frames"),
           config: Optional[str] = typer.Option(None),
           ear_threshold: Optional[float] = None,
           consecutive_frames: Optional[int] = None,
           debounce_ms: Optional[int] = None,
           disabled: bool = False,
           log_level: str = "WARNING"):
    """
    Run the detector over a recorded EAR trace, deterministically and without a camera.
    """
    _setup_logging(log_level)
    settings = _settings(config, ear_threshold, consecutive_frames, debounce_ms, disabled)
    from .io.replay import ReplaySource, ReplayLandmarks, load_trace

    source = ReplaySource(load_trace(trace))
    sched = ManualScheduler()
    session = SessionController(ReplayLandmarks(), source, sched, settings.detector)

    def on_blink(count: int):
        # trace time, not wall time
        ts = session.state.last_accepted_ts / 1000.0
        print(BlinkEvent(ts=ts, count=count, avg_ear=session.avg_ear).model_dump_json())

    session.emitter.callback = on_blink
    session.start()
    sched.run()
    session.stop()
    print(session.diagnostics().model_dump_json())


@app.command(name="config")
def show_config(config: Optional[str] = typer.Option(None)):
    """Print the effective settings as JSON."""
    print(load_config(config).model_dump_json(indent=2))


if __name__ == "__main__":
    app()
