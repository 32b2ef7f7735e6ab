"""Outbound HTTP integrations (NPI Registry, Daily, Phaxio, EmailIt, LLM)."""
