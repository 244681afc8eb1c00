"""
Animation Controller

Manages keyframe playback for a skeleton.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Protocol

from ..config.settings import FRAME_RATE, MAX_FRAMES, load_playback_config
from .animation import Keyframe
from .skeleton import Bone, Skeleton

logger = logging.getLogger(__name__)


class Clock(Protocol):
    """Periodic callback source supplied by the host event loop."""

    def schedule_interval(self, callback: Callable[[], None], interval_ms: float) -> Any:
        """Call callback every interval_ms until cancelled; return a handle."""

    def cancel(self, handle: Any) -> None:
        """Stop a schedule created by schedule_interval."""


class ManualClock:
    """
    Clock driven by explicit advance() calls.

    Used by headless hosts (the command line, tests) where no real
    timer exists.
    """

    def __init__(self):
        self.now_ms = 0.0
        self._schedules: Dict[int, Dict[str, Any]] = {}
        self._next_handle = 0

    def schedule_interval(self, callback: Callable[[], None], interval_ms: float) -> int:
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")
        handle = self._next_handle
        self._next_handle += 1
        self._schedules[handle] = {
            "callback": callback,
            "interval": interval_ms,
            "next": self.now_ms + interval_ms,
        }
        return handle

    def cancel(self, handle: int) -> None:
        self._schedules.pop(handle, None)

    @property
    def active_count(self) -> int:
        return len(self._schedules)

    def advance(self, delta_ms: float):
        """Move time forward, firing every callback that comes due."""
        end = self.now_ms + delta_ms
        while True:
            due = [
                (entry["next"], handle) for handle, entry in self._schedules.items()
                if entry["next"] <= end
            ]
            if not due:
                break
            when, handle = min(due)
            entry = self._schedules[handle]
            self.now_ms = when
            entry["next"] = when + entry["interval"]
            entry["callback"]()
        self.now_ms = end


class PlaybackController:
    """
    Controls keyframe playback for a skeleton.

    Manages:
    - Current frame and play/stop state
    - Switching bones in and out of animation mode
    - Applying sampled keyframes to every bone on each tick
    - Committing the current pose as keyframes
    """

    def __init__(
        self,
        skeleton: Skeleton,
        clock: Optional[Clock] = None,
        frame_rate: int = FRAME_RATE,
        max_frames: int = MAX_FRAMES,
    ):
        """
        Initialize playback controller.

        Args:
            skeleton: Skeleton to animate
            clock: Periodic callback source (None: drive with update())
            frame_rate: Frames per second
            max_frames: Frame count after which playback wraps to 0
        """
        if frame_rate <= 0 or max_frames <= 0:
            raise ValueError(f"frame_rate and max_frames must be positive, got {frame_rate}, {max_frames}")

        self.skeleton = skeleton
        self.clock = clock
        self.frame_rate = frame_rate
        self.max_frames = max_frames
        self.current_frame: int = 0
        self.is_playing: bool = False
        self._timer_handle: Any = None
        self._elapsed: float = 0.0

    @classmethod
    def from_config(cls, skeleton: Skeleton, clock: Optional[Clock] = None, path=None) -> PlaybackController:
        """
        Create a controller with frame rate and frame count read from JSON.

        Args:
            skeleton: Skeleton to animate
            clock: Periodic callback source
            path: Playback config file (defaults to assets/config/playback.json)
        """
        config = load_playback_config(path)
        logger.debug("Playback config: %s", config)
        return cls(skeleton, clock=clock, **config)

    @property
    def interval_ms(self) -> float:
        return 1000.0 / self.frame_rate

    def play(self):
        """Put every bone in animation mode and start ticking."""
        if self.is_playing:
            return
        self.skeleton.set_animation_mode(True)
        self.skeleton.apply_frame(self.current_frame)
        self.is_playing = True
        self._elapsed = 0.0
        if self.clock is not None:
            self._timer_handle = self.clock.schedule_interval(self.tick, self.interval_ms)
        logger.debug("Playback started at frame %d (%d fps)", self.current_frame, self.frame_rate)

    def stop(self):
        """Leave animation mode, rewind to frame 0 and cancel the tick. Safe to repeat."""
        if self._timer_handle is not None and self.clock is not None:
            self.clock.cancel(self._timer_handle)
        self._timer_handle = None
        self.is_playing = False
        self.current_frame = 0
        self._elapsed = 0.0
        self.skeleton.set_animation_mode(False)
        logger.debug("Playback stopped")

    def toggle(self):
        if self.is_playing:
            self.stop()
        else:
            self.play()

    def tick(self):
        """Advance one frame (wrapping at max_frames) and apply it."""
        if not self.is_playing:
            return
        self.current_frame = (self.current_frame + 1) % self.max_frames
        self.skeleton.apply_frame(self.current_frame)

    def update(self, delta_time: float):
        """
        Advance playback by elapsed time for hosts without a Clock.

        Args:
            delta_time: Time elapsed since last update (seconds)
        """
        if not self.is_playing:
            return
        self._elapsed += delta_time * 1000.0
        while self._elapsed >= self.interval_ms:
            self._elapsed -= self.interval_ms
            self.tick()

    def seek(self, frame: int):
        """Jump to a frame (wrapped into range); re-sample if playing."""
        self.current_frame = int(frame) % self.max_frames
        if self.is_playing:
            self.skeleton.apply_frame(self.current_frame)

    def commit_keyframe(self, bone: Bone) -> Keyframe:
        """Store bone's current pose as a keyframe at the current frame."""
        return bone.commit_keyframe(self.current_frame)

    def commit_keyframes(self) -> List[Keyframe]:
        """Store every bone's current pose at the current frame."""
        return [self.commit_keyframe(bone) for bone in self.skeleton.walk()]

    def __repr__(self):
        state = "playing" if self.is_playing else "stopped"
        return f"PlaybackController(frame={self.current_frame}/{self.max_frames}, {state})"
