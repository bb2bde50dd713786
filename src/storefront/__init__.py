"""Apparel storefront built on the Protean domain framework."""
