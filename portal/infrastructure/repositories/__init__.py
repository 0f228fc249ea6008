"""Repositories de acesso a dados (SQLModel + AsyncSession)."""
