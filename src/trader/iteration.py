from __future__ import annotations

import logging
from datetime import datetime

from src.domain.models import Direction, IterationOutcome, TrackedAsset
from src.strategy.lunar import build_trade_intent, classify_phase, lunar_age, trade_assets
from src.trader.session import Session
from src.trading.swap_order import build_swap_call
from src.vault.assets import resolve_asset, same_address

logger = logging.getLogger(__name__)


def run_iteration(session: Session, *, now: datetime | None = None, age: float | None = None) -> IterationOutcome:
    """
    One pass of the bot: signal -> intent -> route -> encoded call -> transaction.

    Skips are returned as outcomes. Collaborator failures (RPC, HTTP, reverts)
    raise and are classified by the scheduler.
    """
    if age is None:
        age = lunar_age(now)
    logger.info(f"The current lunar age is {age:.2f} days")

    direction = classify_phase(age)
    if direction == Direction.NONE:
        return IterationOutcome.skipped("outside the new moon / full moon windows", lunar_age=age)

    incoming_id, outgoing_id = trade_assets(direction, session.pair)
    incoming = resolve_asset(session.snapshot, incoming_id)
    outgoing = resolve_asset(session.snapshot, outgoing_id)

    # The resolver falls back to the first tracked asset; never sell that by mistake.
    if outgoing is None or not same_address(outgoing.id, outgoing_id):
        return IterationOutcome.skipped(f"vault does not track the outgoing asset {outgoing_id}")
    if incoming is None or not same_address(incoming.id, incoming_id):
        # Buying an asset the vault does not hold yet is fine; keep the requested id.
        logger.info("Incoming asset %s is not tracked by the vault yet", incoming_id)
        incoming = TrackedAsset(id=incoming_id)

    balance = session.balances.balance_of(session.vault_address, outgoing.id)
    intent = build_trade_intent(direction, session.pair, balance, session.trade_size_bps)
    logger.info(
        "%s signal: %s %s of %s for %s (vault balance %s)",
        direction.value,
        "selling" if direction == Direction.SELL else "spending",
        intent.outgoing_amount,
        outgoing.symbol or outgoing.id,
        incoming.symbol or incoming.id,
        balance,
    )
    if intent.outgoing_amount <= 0:
        return IterationOutcome.skipped(f"nothing to trade: vault balance of {outgoing.id} is {balance}")

    route = session.price_oracle.quote(incoming.id, outgoing.id, intent.outgoing_amount)
    if not route.is_complete:
        logger.warning("No route for uniswap price found: %s", route.message or route.status.value)
        return IterationOutcome.skipped(f"no swap route: {route.message or route.status.value}")

    call = build_swap_call(
        intent,
        route,
        adapter=session.adapter,
        integration_manager=session.integration_manager,
        comptroller=session.comptroller,
        sender=session.sender,
    )
    if call is None:
        return IterationOutcome.skipped("swap call could not be built")

    result = session.submitter.submit(call)
    if result is None:
        return IterationOutcome.dry_run("validated and priced, not sent", direction=direction.value)
    return IterationOutcome.traded(result)
