"""Markup tokenizer used by the page scanner."""
