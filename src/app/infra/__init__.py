"""Infraestrutura: HTTP, stores e adapters de provedores."""
