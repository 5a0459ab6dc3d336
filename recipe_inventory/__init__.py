"""Recipe-to-inventory resolution and deduction engine."""

__version__ = "1.0.0"
