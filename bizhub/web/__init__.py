"""Server-side rendering helpers: theme, notices and page markup."""
