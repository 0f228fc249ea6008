# Portal da Lembrança
"""
Estrutura modular do Portal da Lembrança.

Módulos:
- config: Configuração, constantes, exceções e logging
- domain: Modelos de dados (SQLModel)
- infrastructure: Banco de dados, Redis, repositories e gateway de pagamento
- services: Lógica de negócio
- presentation: Rotas REST e schemas
- server: Aplicação FastAPI, middleware e handlers
"""
