"""Conversation aggregation: directory, history fetch/merge and turn pairing."""
