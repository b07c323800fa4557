"""SalesFlow: sales order management with a role-gated fulfillment workflow."""

__version__ = "1.0.0"
