"""Gateways wrapping the external systems checkout depends on."""
