"""
Sweep side classification.

A print at or through the ask was paid for by an aggressive buyer; a print at
or through the bid was hit by an aggressive seller. Prints inside the spread
carry no directional information.
"""

from sweep_backtest.models.sweep import InferredSide, TradeLocation

DEFAULT_QUOTE_TOLERANCE = 0.01

_SIDE_BY_LOCATION = {
    TradeLocation.BELOW_BID: InferredSide.SELL,
    TradeLocation.AT_BID: InferredSide.SELL,
    TradeLocation.MIDPOINT: InferredSide.NEUTRAL,
    TradeLocation.AT_ASK: InferredSide.BUY,
    TradeLocation.ABOVE_ASK: InferredSide.BUY,
}


def classify(trade_location: TradeLocation) -> InferredSide:
    """Map a trade location to the side it implies."""
    return _SIDE_BY_LOCATION[TradeLocation(trade_location)]


def locate_trade(
    price: float,
    bid: float,
    ask: float,
    tolerance: float = DEFAULT_QUOTE_TOLERANCE,
) -> TradeLocation:
    """
    Place a traded price against its quote.

    Args:
        price: Traded option price
        bid: Quoted bid at the time of the trade
        ask: Quoted ask at the time of the trade
        tolerance: Distance in dollars that still counts as "at" a quote

    Returns:
        The TradeLocation the price falls into
    """
    near_bid = abs(price - bid) <= tolerance
    near_ask = abs(price - ask) <= tolerance

    if near_bid and near_ask:
        # Locked or one-tick market
        if abs(price - bid) <= abs(price - ask):
            return TradeLocation.AT_BID
        return TradeLocation.AT_ASK
    if near_bid:
        return TradeLocation.AT_BID
    if near_ask:
        return TradeLocation.AT_ASK
    if price < bid:
        return TradeLocation.BELOW_BID
    if price > ask:
        return TradeLocation.ABOVE_ASK
    return TradeLocation.MIDPOINT
