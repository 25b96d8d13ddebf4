"""Delivery fee quoting and ETA estimation for the Benue marketplace."""
