"""Port implementations backed by Telethon, SoCo, SQLite, and HTTP APIs."""
