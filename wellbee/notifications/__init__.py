"""Notification emission (server side) and polling (client side)."""
