"""
Ports: attachment points between diagram nodes and links.

- Name and direction (in/out).
- A node exposes at most one port per direction ("In", "Out").
- Compatibility when connecting source port -> target port.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

IN_PORT_NAME = "In"
OUT_PORT_NAME = "Out"


class PortDirection(str, Enum):
    IN = "in"
    OUT = "out"


@dataclass(frozen=True)
class Port:
    """
    Single port: name and direction.

    Used in node port declarations and in links (node_id, port_index).
    """

    name: str
    direction: PortDirection

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("Port name must be non-empty")

    @property
    def is_input(self) -> bool:
        return self.direction == PortDirection.IN

    @property
    def is_output(self) -> bool:
        return self.direction == PortDirection.OUT

    def compatible_with(self, other: Port) -> bool:
        """True if self (source) can connect to other (target): OUT -> IN only."""
        return self.direction == PortDirection.OUT and other.direction == PortDirection.IN


def in_port() -> Port:
    return Port(IN_PORT_NAME, PortDirection.IN)


def out_port() -> Port:
    return Port(OUT_PORT_NAME, PortDirection.OUT)
