"""Rendering of raw lines into escaped, tagged markup."""
