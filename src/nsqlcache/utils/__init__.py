"""Utilities for nsqlcache."""
