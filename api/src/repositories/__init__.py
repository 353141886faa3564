"""asyncpg repositories for users, contacts and addresses."""
