"""Error types raised by the L3Out planner."""

from __future__ import annotations


class L3OutError(Exception):
    """Base class for all planner errors."""


class ValidationError(L3OutError, ValueError):
    """An input field violated a constraint.

    ``field`` names the offending input (dotted for nested values, e.g.
    ``paths.border.vlan_id``) and ``constraint`` describes what was expected.
    """

    def __init__(self, field: str, constraint: str) -> None:
        super().__init__(f"{field}: {constraint}")
        self.field = field
        self.constraint = constraint


class SubnetExhaustedError(ValidationError):
    """The interconnect subnet cannot hold every node plus gateway and floating IP."""

    def __init__(self, subnet: str, required: int, available: int) -> None:
        super().__init__(
            "interconnect_subnet",
            f"{subnet} provides {available} host addresses, {required} required",
        )
        self.subnet = subnet
        self.required = required
        self.available = available


class ConfigError(L3OutError, ValueError):
    """The configuration file is malformed."""
