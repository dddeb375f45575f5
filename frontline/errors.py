"""
Exception types for the frontline engine.

Illegal player input is never raised; it is ignored by the controller.
Everything here signals a programming or configuration error.
"""


class InvariantViolation(RuntimeError):
    """A force or stack reached a state the rules forbid."""


class NonTerminatingBattle(InvariantViolation):
    """A battle exceeded the tick guard without either side being destroyed."""


class ScenarioError(ValueError):
    """Malformed scenario, map or unit catalog configuration."""
