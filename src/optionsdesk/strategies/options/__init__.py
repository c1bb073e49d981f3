"""Built-in option strategy definitions."""

from optionsdesk.strategies.options.bear_call_spread import BearCallSpread
from optionsdesk.strategies.options.bear_put_spread import BearPutSpread
from optionsdesk.strategies.options.bull_call_spread import BullCallSpread
from optionsdesk.strategies.options.bull_put_spread import BullPutSpread
from optionsdesk.strategies.options.iron_butterfly import IronButterfly
from optionsdesk.strategies.options.iron_condor import IronCondor

__all__ = [
    "BearCallSpread",
    "BearPutSpread",
    "BullCallSpread",
    "BullPutSpread",
    "IronButterfly",
    "IronCondor",
]
