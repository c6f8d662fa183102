"""Affiliate link resolver HTTP service."""
