"""
Timeline Player

Virtual clock driving a Timeline. Converts between frames and time using the
configured fps, applies each frame and publishes the outcome on the EventBus.

Playback runs as a single asyncio task; seek/step can be used without it
(frame-by-frame scrubbing).
"""

import asyncio
from typing import Optional, TYPE_CHECKING

from sequencer.models.enums import LogCategory, PlaybackState
from sequencer.models.events import (
    PlaybackStateChangedEvent,
    SequenceChangedEvent,
    SequenceFailedEvent,
    TimelineFrameEvent,
)
from sequencer.services.timeline import FrameResult, Timeline
from sequencer.utils.logger import get_category_logger

if TYPE_CHECKING:
    from sequencer.services.event_bus import EventBus

log = get_category_logger(LogCategory.PLAYBACK)


class TimelinePlayer:
    """
    Frame based player for a Timeline.

    The playback range defaults to the first/last keyframe of the timeline and
    can be pinned with start_time/end_time.

    Usage:
        player = TimelinePlayer(timeline, event_bus, fps=24)
        await player.seek(1.5)       # apply a single time
        await player.step()          # next frame
        await player.play()          # start background playback
        await player.wait()          # until the end of the range (no loop)
    """

    def __init__(
        self,
        timeline: Timeline,
        event_bus: Optional["EventBus"] = None,
        fps: float = 30.0,
        loop: bool = False,
        start_time: Optional[float] = None,
        end_time: Optional[float] = None,
    ):
        if fps <= 0:
            raise ValueError(f"fps must be positive, got {fps}")

        self.timeline = timeline
        self.event_bus = event_bus
        self.fps = fps
        self.loop = loop
        self._start_time = start_time
        self._end_time = end_time

        self._state = PlaybackState.STOPPED
        self._current_time: float = self.start_time
        self._play_task: Optional[asyncio.Task] = None
        self.last_result: Optional[FrameResult] = None
        self.last_error: Optional[Exception] = None

    # ------------------------------------------------------------
    # Range / frame conversion
    # ------------------------------------------------------------

    @property
    def start_time(self) -> float:
        if self._start_time is not None:
            return self._start_time
        start = self.timeline.start_time
        return start if start is not None else 0.0

    @property
    def end_time(self) -> float:
        if self._end_time is not None:
            return self._end_time
        end = self.timeline.end_time
        return end if end is not None else self.start_time

    @property
    def current_time(self) -> float:
        return self._current_time

    @property
    def current_frame(self) -> int:
        return self.time_to_frame(self._current_time)

    @property
    def last_frame(self) -> int:
        return self.time_to_frame(self.end_time)

    def time_to_frame(self, time: float) -> int:
        return int(round((time - self.start_time) * self.fps))

    def frame_to_time(self, frame: int) -> float:
        return self.start_time + frame / self.fps

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def is_playing(self) -> bool:
        return self._state == PlaybackState.PLAYING

    # ------------------------------------------------------------
    # Scrubbing
    # ------------------------------------------------------------

    async def seek(self, time: float) -> FrameResult:
        """Move the clock to `time` and apply it to the timeline."""
        self._current_time = time
        result = self.timeline.set_time(time)
        self.last_result = result
        await self._publish_frame(result)
        return result

    async def step(self, frames: int = 1) -> FrameResult:
        """Move by whole frames (negative = backwards), clamped to the playback range."""
        frame = min(max(self.current_frame + frames, 0), self.last_frame)
        return await self.seek(self.frame_to_time(frame))

    async def _publish_frame(self, result: FrameResult) -> None:
        if self.event_bus is None:
            return

        for sequence in result.changed:
            await self.event_bus.publish(
                SequenceChangedEvent(getattr(sequence, "target_id", None), sequence.name, result.time)
            )
        for target_id, error in result.failed.items():
            await self.event_bus.publish(SequenceFailedEvent(target_id, result.time, str(error)))

        await self.event_bus.publish(
            TimelineFrameEvent(result.time, self.time_to_frame(result.time), result.changed_names)
        )

    # ------------------------------------------------------------
    # Playback
    # ------------------------------------------------------------

    async def play(self) -> None:
        """Start playback from the current time (rewinds if already at the end)."""
        if self.is_playing:
            return
        if self.current_frame >= self.last_frame and not self.loop:
            self._current_time = self.start_time

        self.last_error = None
        await self._set_state(PlaybackState.PLAYING)
        self._play_task = asyncio.create_task(self._run_loop())
        log.info("Playback started", fps=self.fps, start=self.start_time, end=self.end_time, loop=self.loop)

    async def pause(self) -> None:
        """Stop the clock, keeping the current time."""
        if not self.is_playing:
            return
        await self._cancel_task()
        await self._set_state(PlaybackState.PAUSED)

    async def stop(self) -> None:
        """Stop the clock and rewind to the start of the range (without applying it)."""
        await self._cancel_task()
        self._current_time = self.start_time
        await self._set_state(PlaybackState.STOPPED)

    async def wait(self) -> None:
        """Wait for the playback task to finish (never returns when looping)."""
        if self._play_task is not None:
            await asyncio.shield(self._play_task)

    async def _cancel_task(self) -> None:
        task, self._play_task = self._play_task, None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _set_state(self, new_state: PlaybackState) -> None:
        old_state, self._state = self._state, new_state
        if old_state == new_state:
            return
        log.debug("Playback state changed", old=old_state.name, new=new_state.name)
        if self.event_bus is not None:
            await self.event_bus.publish(PlaybackStateChangedEvent(old_state, new_state))

    async def _run_loop(self) -> None:
        frame = max(self.current_frame, 0)
        frame_count = 0
        cancelled = False
        try:
            while True:
                await self.seek(self.frame_to_time(frame))
                frame_count += 1

                if frame >= self.last_frame:
                    if not self.loop:
                        break
                    frame = 0
                else:
                    frame += 1

                await asyncio.sleep(1 / self.fps)

        except asyncio.CancelledError:
            cancelled = True
            log.debug("Playback task cancelled", time=self._current_time)
            raise
        except Exception as ex:
            self.last_error = ex
            log.error("Playback aborted", time=self._current_time, error=str(ex), error_type=type(ex).__name__)
        finally:
            log.info("Playback finished", frames=frame_count)
            # pause()/stop() own the state after a cancel
            if not cancelled:
                self._play_task = None
                await self._set_state(PlaybackState.STOPPED)
