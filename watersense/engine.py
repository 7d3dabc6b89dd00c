import threading
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, List, Mapping, Optional, Sequence

from watersense.alerts import AlertLog, AlertRecorder
from watersense.classifier import classify_station
from watersense.config import (
    ALERT_LEVEL, ALERT_LOG_SIZE, CYCLE_PERIOD_MS, RECENT_ALERTS,
    SERIES_SIZE, SURGE_PER_TICK
)
from watersense.models import AlertEvent, Snapshot, Station
from watersense.random_source import RandomSource
from watersense.registry import StationRegistry
from watersense.simulator import ReadingSimulator
from watersense.utils import setup_logger

logger = setup_logger("engine")

Subscriber = Callable[[Snapshot], None]


class SchedulerBusyError(RuntimeError):
    """A cycle was triggered while another one was still running."""


class SchedulerStoppedError(RuntimeError):
    """A cycle was triggered after the scheduler was stopped."""


class SchedulerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass
class EngineState:
    """Everything a cycle mutates, owned by the scheduler."""
    registry: StationRegistry
    recorder: AlertRecorder
    cycle: int = 0
    last_updated: Optional[datetime] = None

    @property
    def alert_log(self) -> AlertLog:
        return self.recorder.log

    def snapshot(self, recent_alerts: int = RECENT_ALERTS) -> Snapshot:
        return self.registry.snapshot(
            cycle=self.cycle,
            last_updated=self.last_updated,
            alert_count=len(self.alert_log),
            recent_alerts=self.alert_log.recent(recent_alerts),
        )


@dataclass(frozen=True)
class CycleResult:
    timestamp: datetime
    bootstrap: bool
    alerts: List[AlertEvent]
    failed: List[str]


def run_cycle(state: EngineState,
              simulator: ReadingSimulator,
              timestamp: datetime,
              bootstrap: bool = False,
              alert_level: float = ALERT_LEVEL,
              surge_per_tick: float = SURGE_PER_TICK) -> CycleResult:
    """
    Simulate, classify, record alerts and extend the series for one cycle.

    A station whose update raises keeps its last known state, emits no
    alert and still gets a series point. Everything is staged first, so a
    failure before the apply step leaves the state exactly as it was.
    """
    fleet: List[Station] = []
    updated: List[Station] = []
    failed: List[str] = []
    for station in list(state.registry):
        try:
            candidate = classify_station(simulator.advance(station), alert_level, surge_per_tick)
        except Exception:
            logger.error(f"Station {station.id} failed to update, keeping last known state",
                         exc_info=True)
            failed.append(station.id)
            fleet.append(station)
            continue
        updated.append(candidate)
        fleet.append(candidate)

    alerts = state.recorder.detect(updated, timestamp, bootstrap=bootstrap)
    points = state.registry.series.points_for(fleet, timestamp)

    state.registry.commit(updated)
    state.recorder.commit(alerts)
    state.registry.series.push(points)

    state.cycle += 1
    state.last_updated = timestamp
    return CycleResult(timestamp=timestamp, bootstrap=bootstrap, alerts=alerts, failed=failed)


class CycleScheduler:
    """
    Runs cycles one at a time and publishes a snapshot after each.

    The first cycle is the bootstrap cycle. ``run`` then waits ``period``
    seconds between cycles using ``wait``, which defaults to the stop event
    so that ``stop`` interrupts the pause immediately. Tests inject ``clock``
    and ``wait`` to drive the loop without real time passing.
    """

    def __init__(self,
                 state: EngineState,
                 simulator: ReadingSimulator,
                 period_ms: int = CYCLE_PERIOD_MS,
                 clock: Callable[[], datetime] = datetime.now,
                 wait: Optional[Callable[[float], bool]] = None,
                 recent_alerts: int = RECENT_ALERTS,
                 alert_level: float = ALERT_LEVEL,
                 surge_per_tick: float = SURGE_PER_TICK):
        if period_ms <= 0:
            raise ValueError("Cycle period must be positive")
        self.state = state
        self.simulator = simulator
        self.period_ms = period_ms
        self.clock = clock
        self.recent_alerts = recent_alerts
        self.alert_level = alert_level
        self.surge_per_tick = surge_per_tick

        self._stop_event = threading.Event()
        self._wait = wait or self._stop_event.wait
        self._cycle_lock = threading.Lock()
        self._subscribers: List[Subscriber] = []

        self.status = SchedulerState.IDLE
        self.snapshot: Optional[Snapshot] = None

    @property
    def period(self) -> float:
        return self.period_ms / 1000

    @property
    def bootstrapped(self) -> bool:
        return self.state.cycle > 0

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def subscribe(self, callback: Subscriber):
        """Register a renderer called with each published snapshot."""
        self._subscribers.append(callback)

    def tick(self) -> Snapshot:
        """Run exactly one cycle; the first one is the bootstrap cycle."""
        if self.stopped:
            raise SchedulerStoppedError("Scheduler has been stopped")
        if not self._cycle_lock.acquire(blocking=False):
            raise SchedulerBusyError("A cycle is already running")
        try:
            self.status = SchedulerState.RUNNING
            bootstrap = not self.bootstrapped
            result = run_cycle(
                self.state, self.simulator, self.clock(),
                bootstrap=bootstrap,
                alert_level=self.alert_level,
                surge_per_tick=self.surge_per_tick,
            )
            snapshot = self.state.snapshot(self.recent_alerts)
            self.snapshot = snapshot
            self._publish(snapshot)
            logger.info(
                "Bootstrap cycle complete" if bootstrap else "Cycle complete",
                extra={
                    "cycle": snapshot.cycle,
                    "new_alerts": len(result.alerts),
                    "failed_stations": result.failed,
                    "online": snapshot.online_count,
                    "alert_log": snapshot.alert_count,
                }
            )
            return snapshot
        finally:
            self.status = SchedulerState.STOPPED if self.stopped else SchedulerState.IDLE
            self._cycle_lock.release()

    def _publish(self, snapshot: Snapshot):
        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception:
                logger.error("Snapshot subscriber failed", exc_info=True)

    def run(self, max_cycles: Optional[int] = None):
        """
        Bootstrap if needed, then run periodic cycles until stopped.

        ``max_cycles`` bounds the periodic cycles; the bootstrap is not counted.
        A failed cycle is logged and the loop waits for the next period. A
        failed bootstrap is retried as the next cycle.
        """
        logger.info(f"Starting cycle scheduler with a {self.period_ms} ms period...")
        if not self.bootstrapped and not self.stopped:
            self._guarded_tick()

        completed = 0
        while max_cycles is None or completed < max_cycles:
            if self._wait(self.period) or self.stopped:
                break
            if not self._guarded_tick():
                break
            completed += 1

        logger.info("Cycle scheduler stopped")

    def _guarded_tick(self) -> bool:
        """Run one cycle, logging a failure instead of raising; False once stopped."""
        try:
            self.tick()
        except SchedulerStoppedError:
            return False
        except Exception:
            logger.error("Cycle failed, waiting for the next period", exc_info=True)
        return True

    def run_in_background(self, max_cycles: Optional[int] = None) -> threading.Thread:
        thread = threading.Thread(target=self.run, args=(max_cycles,),
                                  name="watersense-scheduler", daemon=True)
        thread.start()
        return thread

    def stop(self):
        """Prevent further cycles; a cycle already running completes first."""
        self._stop_event.set()
        if self.status is SchedulerState.IDLE:
            self.status = SchedulerState.STOPPED
        logger.info("Stopping cycle scheduler...")


def create_scheduler(descriptors: Sequence[Mapping[str, str]],
                     seed: Optional[int] = None,
                     period_ms: int = CYCLE_PERIOD_MS,
                     alert_log_size: int = ALERT_LOG_SIZE,
                     series_size: int = SERIES_SIZE,
                     **scheduler_options) -> CycleScheduler:
    """Initialize the registry from ``descriptors`` and wire a ready scheduler."""
    rng = RandomSource(seed)
    registry = StationRegistry(rng=rng, series_size=series_size)
    registry.initialize(descriptors)
    state = EngineState(registry=registry, recorder=AlertRecorder(AlertLog(alert_log_size)))
    return CycleScheduler(state, ReadingSimulator(rng=rng), period_ms=period_ms,
                          **scheduler_options)
