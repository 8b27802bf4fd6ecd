"""
Two-way signal switch.
"""

import structlog

from .signal import Signal, SignalGraph

logger = structlog.get_logger()


class TwoWaySwitch:
    """
    Routes one input signal to either of two outputs.

    The switch state is itself a signal: at its low value the input feeds
    output1, at its high value the input feeds output2. UI toggles and
    mode selectors subscribe to the state signal.
    """

    def __init__(self, graph: SignalGraph, name: str = "switch"):
        """
        Initialize switch.

        Args:
            graph: Graph the switch's signals are created in
            name: Prefix for the switch's signal names
        """
        self.name = name
        self.state: Signal = graph.create(name=f"{name}.state")
        self.input: Signal = graph.create(name=f"{name}.input")
        self.output1: Signal = graph.create(name=f"{name}.output1")
        self.output2: Signal = graph.create(name=f"{name}.output2")

        self.state.set_value(self.state.get_low())
        self.input.subscribe(self.output1)

    @property
    def routes_to_output2(self) -> bool:
        """Check if the input currently feeds output2."""
        return self.state.get_value() != self.state.get_low()

    def toggle(self) -> None:
        """Move the input to the other output and flip the state."""
        if not self.routes_to_output2:
            self.input.unsubscribe(self.output1)
            self.input.subscribe(self.output2)
            self.state.set_value(self.state.get_high())
        else:
            self.input.unsubscribe(self.output2)
            self.input.subscribe(self.output1)
            self.state.set_value(self.state.get_low())

        logger.debug(
            "Switch toggled",
            switch=self.name,
            output="output2" if self.routes_to_output2 else "output1",
        )
