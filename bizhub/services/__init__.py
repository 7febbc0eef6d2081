"""Services layer: Supabase repositories, domain services and the Database facade."""
