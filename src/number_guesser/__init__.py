"""Guess-the-number engine with generated narration and optional speech."""
