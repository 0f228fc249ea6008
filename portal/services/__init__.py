"""Services: regras de negócio entre routers e repositories."""
