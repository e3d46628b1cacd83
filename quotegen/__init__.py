"""Quotegen: quotes by emotion, fetched through OpenRouter."""
