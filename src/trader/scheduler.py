from __future__ import annotations

import logging
import time
from typing import Callable

from src.domain.models import IterationOutcome, OutcomeStatus
from src.trading.errors import describe_error

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 60


class LoopScheduler:
    """
    Run an iteration, classify how it ended, wait a fixed delay, repeat.

    The next pass is only scheduled once the current one (including its error
    handling) has finished, so passes never overlap. There is no backoff and
    no retry cap: a failing iteration is retried every interval forever.
    """

    def __init__(self, interval_seconds: float = DEFAULT_INTERVAL_SECONDS, *, sleep: Callable[[float], None] = time.sleep):
        self.interval_seconds = float(interval_seconds)
        self._sleep = sleep
        self.iterations = 0
        self.consecutive_failures = 0

    def run_once(self, iteration: Callable[[], IterationOutcome]) -> IterationOutcome:
        """Run one iteration; never raises for ordinary exceptions."""
        self.iterations += 1
        try:
            outcome = iteration()
        except Exception as e:
            outcome = IterationOutcome.failed(self._classify(e))

        if outcome.status == OutcomeStatus.FAILED:
            self.consecutive_failures += 1
        else:
            self.consecutive_failures = 0
        self._log_outcome(outcome)
        return outcome

    def _classify(self, e: Exception) -> str:
        try:
            reason = describe_error(e)
        except Exception:
            logger.exception("Could not classify %s; logging it raw", type(e).__name__)
            reason = repr(e)
        logger.error(f"THE BOT FAILED ({type(e).__name__}): {reason}")
        logger.debug("Iteration traceback", exc_info=e)
        return reason

    def _log_outcome(self, outcome: IterationOutcome) -> None:
        if outcome.status == OutcomeStatus.TRADED and outcome.result is not None:
            logger.info(
                "Iteration %d: traded (tx %s, gas used %s)",
                self.iterations,
                outcome.result.transaction_hash,
                outcome.result.gas_used,
            )
        elif outcome.status == OutcomeStatus.FAILED:
            logger.warning(
                "Iteration %d: failed (%d in a row): %s",
                self.iterations,
                self.consecutive_failures,
                outcome.reason,
            )
        else:
            logger.info(
                "Iteration %d: %s, the bot has decided not to trade (%s)",
                self.iterations,
                outcome.status.value.lower(),
                outcome.reason,
            )

    def run(self, iteration: Callable[[], IterationOutcome], *, max_iterations: int | None = None) -> None:
        """Loop forever (or `max_iterations` times), sleeping the interval between passes."""
        done = 0
        while max_iterations is None or done < max_iterations:
            self.run_once(iteration)
            done += 1
            if max_iterations is not None and done >= max_iterations:
                break
            logger.info(f"Scheduling the next iteration in {self.interval_seconds:.0f}s...")
            self._sleep(self.interval_seconds)
