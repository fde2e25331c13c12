"""Textual dashboard for pipeline runs."""
