"""SmartCare - administration API for users, partners and support tickets."""

__version__ = "0.1.0"
