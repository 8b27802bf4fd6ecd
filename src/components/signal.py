"""
Scalar signal propagation for the autopilot.

Signals are the only data-flow primitive of the autopilot. Every sensor,
stick, gain and actuator value is a Signal, and values cross component
boundaries only by subscription. Signals live in a SignalGraph arena and are
addressed through lightweight handles.
"""

import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set


DEFAULT_LOW = -1.0
DEFAULT_HIGH = 1.0


@dataclass
class _Node:
    """Storage of a single signal inside the graph."""
    value: float = 0.0
    low: float = DEFAULT_LOW
    high: float = DEFAULT_HIGH
    name: str = ""
    subscribers: List[int] = field(default_factory=list)


class SignalGraph:
    """
    Arena owning every signal of one autopilot instance.

    Subscriptions are stored as index lists, so the graph never holds
    references between signal objects. A single re-entrant lock serializes
    whole notification cascades: a writer's cascade completes before a
    competing writer starts, with no ordering promised between writers.
    """

    def __init__(self):
        """Initialize an empty graph."""
        self._nodes: List[_Node] = []
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._nodes)

    def create(
        self,
        value: float = 0.0,
        low: float = DEFAULT_LOW,
        high: float = DEFAULT_HIGH,
        name: str = "",
    ) -> "Signal":
        """
        Create a new signal in this graph.

        Args:
            value: Initial value
            low: Low end of the signal's range
            high: High end of the signal's range (may be below low)
            name: Optional name used for logging

        Returns:
            Handle of the new signal
        """
        with self._lock:
            self._nodes.append(
                _Node(value=float(value), low=float(low), high=float(high), name=name)
            )
            index = len(self._nodes) - 1
        return Signal(self, index)

    def signals(self) -> List["Signal"]:
        """Get handles for every signal in creation order."""
        return [Signal(self, i) for i in range(len(self._nodes))]

    def _node(self, index: int) -> _Node:
        return self._nodes[index]

    def _set(self, index: int, value: float) -> None:
        with self._lock:
            self._deliver(index, float(value), set())

    def _deliver(self, index: int, value: float, path: Set[int]) -> None:
        # Depth-first: a subscriber's whole cascade finishes before the next
        # subscriber of the same signal is notified.
        node = self._nodes[index]
        node.value = value
        path.add(index)
        for subscriber in list(node.subscribers):
            if subscriber in path:
                # already on the current path and already holds this value
                continue
            self._deliver(subscriber, value, path)
        path.discard(index)

    def _subscribe(self, index: int, subscriber: int) -> None:
        with self._lock:
            node = self._nodes[index]
            node.subscribers.append(subscriber)
            self._deliver(subscriber, node.value, {index})

    def _unsubscribe(self, index: int, subscriber: int) -> None:
        with self._lock:
            subscribers = self._nodes[index].subscribers
            if subscriber in subscribers:
                subscribers.remove(subscriber)


class Signal:
    """
    Bounded, observable scalar value.

    The range (low/high) describes the signal, it does not clamp it. Clamping
    is the writer's job. Setting a value synchronously notifies all
    subscribers in subscription order before returning.
    """

    __slots__ = ("_graph", "_index")

    def __init__(self, graph: SignalGraph, index: int):
        self._graph = graph
        self._index = index

    def __eq__(self, other) -> bool:
        if not isinstance(other, Signal):
            return NotImplemented
        return self._graph is other._graph and self._index == other._index

    def __hash__(self) -> int:
        return hash((id(self._graph), self._index))

    def __repr__(self) -> str:
        node = self._graph._node(self._index)
        label = node.name or f"#{self._index}"
        return f"Signal({label}={node.value!r})"

    @property
    def name(self) -> str:
        return self._graph._node(self._index).name

    @property
    def subscribers(self) -> List["Signal"]:
        """Get the current subscribers in notification order."""
        with self._graph._lock:
            indices = list(self._graph._node(self._index).subscribers)
        return [Signal(self._graph, i) for i in indices]

    def get_value(self) -> float:
        return self._graph._node(self._index).value

    def set_value(self, value: float) -> None:
        """
        Store a value and notify all subscribers.

        Args:
            value: New signal value
        """
        self._graph._set(self._index, value)

    def subscribe(self, other: "Signal") -> None:
        """
        Subscribe another signal to this one.

        The subscriber immediately receives the current value so it never
        starts stale.

        Args:
            other: Signal to be notified of future changes

        Raises:
            ValueError: If the subscriber belongs to a different graph
        """
        if other._graph is not self._graph:
            raise ValueError("Cannot subscribe a signal from another graph")
        self._graph._subscribe(self._index, other._index)

    def unsubscribe(self, other: "Signal") -> None:
        """Remove a subscriber. Unknown subscribers are ignored."""
        if other._graph is not self._graph:
            return
        self._graph._unsubscribe(self._index, other._index)

    def get_low(self) -> float:
        return self._graph._node(self._index).low

    def get_high(self) -> float:
        return self._graph._node(self._index).high

    def get_bandwidth(self) -> float:
        """Get high minus low. Negative for a reversed axis."""
        node = self._graph._node(self._index)
        return node.high - node.low

    def set_low(self, value: float) -> None:
        self._graph._node(self._index).low = float(value)

    def set_high(self, value: float) -> None:
        self._graph._node(self._index).high = float(value)

    def set_bandwidth(self, low: float, high: float) -> None:
        """
        Set both ends of the signal's range.

        Args:
            low: Low end of the range
            high: High end of the range
        """
        self.set_low(low)
        self.set_high(high)


def snapshot(signals: Dict[str, Signal], precision: Optional[int] = None) -> Dict[str, float]:
    """
    Read a set of named signals into a plain dictionary.

    Args:
        signals: Mapping of names to signals
        precision: Round values to this many digits if given

    Returns:
        Mapping of names to current values
    """
    values = {}
    for name, signal in signals.items():
        value = signal.get_value()
        values[name] = round(value, precision) if precision is not None else value
    return values
