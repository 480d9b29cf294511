"""Webhook Inbox - capture, inspect and clear inbound webhook deliveries."""

__version__ = "0.1.0"
