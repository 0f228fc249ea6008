"""Infraestrutura: engine do banco, Redis, repositories e gateway de pagamento."""
