"""Gostman core components: configuration, logging, models and exceptions."""
