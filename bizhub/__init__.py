"""
BizHub - business directory web tier.

Packages:
- services: Supabase repositories, domain services, Database facade
- auth: session resolution from Supabase access tokens
- web: theme, notices and HTML rendering
- routers: FastAPI page routers
"""
