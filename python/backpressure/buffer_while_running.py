"""Buffer-while-running operator: serialize expensive selections over a source."""

import logging
import threading
from enum import Enum

from reactivex import Observable, abc
from reactivex import operators as ops
from reactivex.disposable import SingleAssignmentDisposable
from reactivex.subject import Subject

from backpressure.exceptions import AlreadyAttachedError, InvalidSelectionError
from backpressure.utils import Operator, Selector

logger = logging.getLogger(__name__)


class SelectionState(Enum):
    IDLE = "idle"
    RUNNING = "running"


class BufferWhileRunning[T, R]:
    """State machine behind buffer_while_running.

    Subscribes to the source as soon as run() is called. Each source value is
    appended to the buffer; when no selection is running the buffer is flushed
    into a new selection. At most one selection subscription exists at a time.

    The output is a hot Subject: observers see only what is emitted after they
    subscribe, plus the terminal signal if it already happened. A batch flushed
    while nobody observes the output is discarded without calling the selector.
    """

    def __init__(
        self,
        source: Observable[T],
        selector: Selector[T, R],
        scheduler: abc.SchedulerBase | None = None,
    ) -> None:
        self._source = source
        self._selector = selector
        self._scheduler = scheduler
        self._subject: Subject[R] = Subject()
        self._lock = threading.RLock()

        self._buffer: list[T] = []
        self._input = SingleAssignmentDisposable()
        self._attached = False
        self._stopped = False

        # _selection is set iff _state is RUNNING
        self._state = SelectionState.IDLE
        self._selection: SingleAssignmentDisposable | None = None

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is SelectionState.RUNNING

    @property
    def is_stopped(self) -> bool:
        return self._stopped

    @property
    def pending(self) -> int:
        """Number of values buffered for the next selection."""
        return len(self._buffer)

    def run(self) -> Observable[R]:
        """Subscribe to the source and return the output observable."""
        with self._lock:
            if self._attached:
                raise AlreadyAttachedError("operator is already subscribed to its source")
            self._attached = True

            self._input.disposable = self._source.subscribe(
                on_next=self._on_next_input,
                on_error=self._on_error_input,
                on_completed=self._on_completed_input,
                scheduler=self._scheduler,
            )

        return self._subject.pipe(ops.as_observable())

    def _on_next_input(self, value: T) -> None:
        with self._lock:
            if self._stopped:
                return
            self._buffer.append(value)
            if self._state is SelectionState.IDLE:
                self._start_next()

    def _on_error_input(self, error: Exception) -> None:
        with self._lock:
            if self._stopped:
                return
            logger.debug("Source failed: %r", error)
            self._stop()
            self._subject.on_error(error)

    def _on_completed_input(self) -> None:
        with self._lock:
            if self._stopped:
                return
            logger.debug("Source completed, %d buffered values dropped", len(self._buffer))
            self._subject.on_completed()
            self._stop()

    def _start_next(self) -> None:
        batch = tuple(self._buffer)
        self._buffer.clear()

        if not batch:
            return

        if not self._subject.observers:
            logger.debug("No observers, skipping selection of %d values", len(batch))
            return

        logger.debug("Starting selection of %d values", len(batch))

        # Slot is claimed before the selector runs; the selector may feed the source
        # and selections may finish inside subscribe()
        slot = SingleAssignmentDisposable()
        self._selection = slot
        self._state = SelectionState.RUNNING

        try:
            selected = self._selector(batch)
        except Exception as e:
            self._fail(e)
            return

        if not isinstance(selected, abc.ObservableBase):
            kind = type(selected).__name__
            self._fail(InvalidSelectionError(f"selector returned {kind}, expected Observable"))
            return

        # Selector terminated the operator re-entrantly
        if self._selection is not slot:
            return

        def on_next(value: R) -> None:
            with self._lock:
                if self._selection is slot:
                    self._subject.on_next(value)

        def on_error(error: Exception) -> None:
            with self._lock:
                if self._selection is slot:
                    logger.debug("Selection failed: %r", error)
                    self._fail(error)

        def on_completed() -> None:
            with self._lock:
                if self._selection is slot:
                    logger.debug("Selection completed, %d values pending", len(self._buffer))
                    self._release_selection()
                    self._start_next()

        slot.disposable = selected.subscribe(
            on_next=on_next,
            on_error=on_error,
            on_completed=on_completed,
            scheduler=self._scheduler,
        )

    def _fail(self, error: Exception) -> None:
        if self._stopped:
            return
        self._stop()
        self._subject.on_error(error)

    def _stop(self) -> None:
        self._stopped = True
        self._buffer.clear()
        self._input.dispose()
        self._release_selection()

    def _release_selection(self) -> None:
        if self._selection is not None:
            self._selection.dispose()
            self._selection = None
        self._state = SelectionState.IDLE


def buffer_while_running[T, R](
    selector: Selector[T, R],
    scheduler: abc.SchedulerBase | None = None,
) -> Operator[T, R]:
    """Run selector over buffered batches, never more than one at a time.

    The first source value starts a selection right away. Values arriving while
    it runs are buffered, and when it completes the selector is called again
    with everything buffered so far, in arrival order. An error from the source,
    the selector or a selection terminates the output with that exception.

    The source is subscribed when the operator is applied, not when the result
    is subscribed, and the selector is only called while the result has at
    least one observer. Source and selections are subscribed on scheduler.

    Example:
        >>> source.pipe(buffer_while_running(lambda batch: save_all(batch)))
    """

    def _operator(source: Observable[T]) -> Observable[R]:
        return BufferWhileRunning(source, selector, scheduler).run()

    return _operator
