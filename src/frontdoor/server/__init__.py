"""Server layer — ASGI request pipeline and pounce listeners."""
