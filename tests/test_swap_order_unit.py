from eth_abi import decode

from src.domain.models import Direction, PricedRoute, RouteStatus, TradeIntent
from src.trading.swap_order import (
    CALL_ON_EXTENSION_SELECTOR,
    CALL_ON_INTEGRATION,
    TAKE_ORDER_SELECTOR,
    apply_slippage,
    build_swap_call,
)

WETH = "0x" + "a" * 40
USDC = "0x" + "b" * 40
ADAPTER = "0x" + "1" * 40
INTEGRATION_MANAGER = "0x" + "2" * 40
COMPTROLLER = "0x" + "3" * 40
SENDER = "0x" + "4" * 40

INTENT = TradeIntent(direction=Direction.SELL, incoming_asset_id=USDC, outgoing_asset_id=WETH, outgoing_amount=1000)
ROUTE = PricedRoute.ok(1000, (WETH, USDC), (3000,))


def _build(route=ROUTE, **overrides):
    kwargs = dict(adapter=ADAPTER, integration_manager=INTEGRATION_MANAGER, comptroller=COMPTROLLER, sender=SENDER)
    kwargs.update(overrides)
    return build_swap_call(INTENT, route, **kwargs)


def test_apply_slippage_uses_integer_truncation():
    assert apply_slippage(10000) == 9500
    assert apply_slippage(7) == 6
    assert apply_slippage(0) == 0


def test_apply_slippage_is_exact_for_token_sized_amounts():
    amount = 123_456_789_012_345_678_901_234_567
    assert apply_slippage(amount) == amount * 9500 // 10000


def test_build_swap_call_encodes_take_order_inside_call_on_integration():
    call = _build()
    assert call is not None
    assert call.comptroller_address.lower() == COMPTROLLER
    assert call.adapter_address.lower() == ADAPTER
    assert call.integration_manager_address.lower() == INTEGRATION_MANAGER
    assert call.sender_address.lower() == SENDER

    adapter, selector, take_order_args = decode(["address", "bytes4", "bytes"], call.payload)
    assert adapter.lower() == ADAPTER
    assert selector == TAKE_ORDER_SELECTOR

    path, fees, outgoing, min_incoming = decode(["address[]", "uint24[]", "uint256", "uint256"], take_order_args)
    assert [p.lower() for p in path] == [WETH, USDC]
    assert list(fees) == [3000]
    assert outgoing == 1000
    assert min_incoming == 950


def test_calldata_targets_call_on_extension_with_integration_manager():
    call = _build()
    assert call.calldata[:4] == CALL_ON_EXTENSION_SELECTOR
    extension, action_id, call_args = decode(["address", "uint256", "bytes"], call.calldata[4:])
    assert extension.lower() == INTEGRATION_MANAGER
    assert action_id == CALL_ON_INTEGRATION
    assert call_args == call.payload

    tx = call.to_transaction()
    assert tx["to"] == call.comptroller_address
    assert tx["from"] == call.sender_address
    assert tx["data"] == "0x" + call.calldata.hex()


def test_missing_contract_addresses_skip_the_build():
    assert _build(adapter=None) is None
    assert _build(integration_manager="") is None
    assert _build(comptroller=None) is None


def test_incomplete_route_skips_the_build():
    assert _build(route=PricedRoute.error("no pool")) is None
    assert _build(route=PricedRoute(status=RouteStatus.OK, output_amount=1000, hop_addresses=None, hop_fees=(3000,))) is None
    assert _build(route=PricedRoute(status=RouteStatus.OK, output_amount=1000, hop_addresses=(WETH, USDC), hop_fees=())) is None
